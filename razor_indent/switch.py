"""Switch header normalization and case separator layout."""

from __future__ import annotations

import logging

from .constants import SWITCH_HEADER_PATTERN, TEXT_OUTPUT_INDENT_PATTERN, TEXT_PREFIX
from .models import RawLineMeta

logger = logging.getLogger(__name__)


def normalize_switch_header(content: str) -> str:
    """Canonicalize the spacing of a ``switch (...) {`` header.

    Examples:
        normalize_switch_header("switch(mode){")  # "switch (mode) {"
        normalize_switch_header("switch ( mode )  {  ")  # "switch (mode) {"
        normalize_switch_header("switch (mode)")  # unchanged, no brace
    """
    match = SWITCH_HEADER_PATTERN.match(content)
    if not match:
        return content
    return f"switch ({match.group(1).strip()}) {{"


def is_separator_line(line: str) -> bool:
    """Whether a line is blank or a bare ``@:`` prefix."""
    stripped = line.strip()
    return not stripped or stripped == TEXT_PREFIX


def insert_switch_separators(
    lines: list[str], meta: list[RawLineMeta | None]
) -> tuple[list[str], int]:
    """Insert a separator before each case label that directly follows a ``break``.

    Only lines inside script/style blocks are considered. The separator is an
    empty line, or a bare ``@:`` at the label's indentation when the label is
    itself a text-output line. An existing blank separator suppresses the
    insertion, so running the layout twice adds nothing new.

    Args:
        lines: Rendered lines, one per input line.
        meta: Switch facts aligned with `lines`; None outside script/style blocks.

    Returns:
        tuple[list[str], int]: Lines with separators, and how many were inserted.

    Examples:
        insert_switch_separators(
            ["break;", "case 2:"],
            [RawLineMeta(is_break=True), RawLineMeta(is_case_or_default=True)],
        )
        # (["break;", "", "case 2:"], 1)
    """
    result: list[str] = []
    inserted = 0
    in_raw = False
    previous_break = False
    previous_blank = False

    for line, line_meta in zip(lines, meta):
        if line_meta is None or not line_meta.is_raw_block:
            in_raw = False
            previous_break = False
            previous_blank = False
            result.append(line)
            continue

        if not in_raw:
            in_raw = True
            previous_break = False
            previous_blank = False

        if line_meta.is_case_or_default and previous_break and not previous_blank:
            prefix_match = TEXT_OUTPUT_INDENT_PATTERN.match(line)
            result.append(f"{prefix_match.group(1)}{TEXT_PREFIX}" if prefix_match else "")
            inserted += 1

        result.append(line)

        is_blank = is_separator_line(line)
        previous_blank = is_blank
        if not is_blank:
            previous_break = line_meta.is_break

    if inserted:
        logger.debug("Inserted %d case separator line(s)", inserted)
    return result, inserted
