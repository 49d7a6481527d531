"""Line splitting and indentation measurement."""

from __future__ import annotations

import math

from .constants import DEFAULT_INDENT_SIZE, LINE_SPLIT_PATTERN
from .models import LineInfo


def sanitize_indent_size(value: object) -> int:
    """Coerce an indent size option to a usable positive integer.

    Non-numeric, non-finite, or non-positive values fall back to the default
    of two columns; fractional values are floored.

    Args:
        value: Requested indent size.

    Returns:
        int: Columns per indent unit.

    Examples:
        sanitize_indent_size(4)  # 4
        sanitize_indent_size(0)  # 2
        sanitize_indent_size(float("nan"))  # 2
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_INDENT_SIZE
    if not math.isfinite(value) or value <= 0:
        return DEFAULT_INDENT_SIZE
    size = math.floor(value)
    return size if size > 0 else DEFAULT_INDENT_SIZE


def detect_line_ending(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def split_lines(text: str) -> tuple[list[str], str]:
    """Split a document into logical lines.

    Args:
        text: Document text.

    Returns:
        tuple[list[str], str]: Lines without their endings, and the line ending
            reused when joining the output.

    Examples:
        split_lines("a\\r\\nb")  # (["a", "b"], "\\r\\n")
        split_lines("")  # ([""], "\\n")
    """
    return LINE_SPLIT_PATTERN.split(text), detect_line_ending(text)


def count_indent_width(leading: str, indent_size: int) -> int:
    """Measure a leading whitespace run in columns.

    A tab counts as one full indent unit; every other whitespace character
    counts as one column.
    """
    width = 0
    for character in leading:
        if character == "\t":
            width += indent_size
        else:
            width += 1
    return width


def analyze_line(index: int, line: str, indent_size: int) -> LineInfo:
    rest = line.lstrip()
    leading = line[: len(line) - len(rest)]
    return LineInfo(
        index=index,
        original=line,
        leading=leading,
        rest=rest,
        leading_width=count_indent_width(leading, indent_size),
    )


def analyze_document(text: str, indent_size: int) -> tuple[list[LineInfo], str]:
    """Split a document and analyze each line.

    Args:
        text: Document text.
        indent_size: Columns per indent unit, used to measure tabs.

    Returns:
        tuple[list[LineInfo], str]: Analyzed lines and the detected line ending.
    """
    lines, line_ending = split_lines(text)
    return [analyze_line(index, line, indent_size) for index, line in enumerate(lines)], line_ending
