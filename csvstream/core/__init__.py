"""Core tokenizer, encoder and byte channels.

WHY: The core package holds the only algorithmic part of csvstream:
the incremental record reader and the field-escaping record writer,
plus the byte source/sink interfaces they run on.

HOW: dialect.py defines the delimiter/trick settings, channels.py the
byte interfaces and buffers, scanner.py the field scanners,
reader.py the RecordReader and writer.py the RecordWriter.
errors.py holds the exception hierarchy shared by all of them.

RULES:
- Core code only depends on ByteSource/ByteSink, never on paths
- Whole-table helpers and the CLI live outside the core
"""
