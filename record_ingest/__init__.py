"""CSV record ingestion with per-line error isolation."""

__version__ = "0.1.0"
