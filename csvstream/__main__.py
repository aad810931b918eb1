"""Package entry point for ``python -m csvstream``.

Delegates to the CLI's main() function.
"""

from csvstream.cli import main

if __name__ == "__main__":
    main()
