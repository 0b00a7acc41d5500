from __future__ import annotations

"""Line parser: split one raw input line into candidate fields.

入力形式はクォート非対応。カンマで単純分割し、値の解釈・検証は行わない。
"""

__all__ = [
    "FIELD_DELIMITER",
    "split_line",
    "strip_line_terminator",
]

FIELD_DELIMITER = ","


def strip_line_terminator(line: str) -> str:
    """Drop a trailing LF or CRLF, leaving the rest of the line verbatim."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


def split_line(line: str) -> list[str]:
    """Split a line on the field delimiter.

    Trailing empty fields are kept (``"Name,"`` -> ``["Name", ""]``) and a line
    without any delimiter yields a single field.
    """
    return line.split(FIELD_DELIMITER)
