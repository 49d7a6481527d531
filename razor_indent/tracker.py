"""Document-level structure scan."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .constants import BREAK_PATTERN, CAPTURE_TAGS, CASE_PATTERN, RAW_TAGS, SWITCH_PATTERN
from .models import BraceCount, IndentPlan, LineInfo, NestingState, RawBlock, ScannerState
from .scanner import (
    closes_tag_line,
    code_view,
    contains_closing_tag,
    count_braces,
    count_leading_closings,
    extract_tags,
    is_markup_line,
    opens_tag_line,
    strip_html_comments,
)

logger = logging.getLogger(__name__)

CAPTURING_STATES = frozenset({ScannerState.IN_TEXT_BLOCK, ScannerState.IN_RAW_BLOCK})


@dataclass
class StructureScan:
    """Output of `track_structure`.

    Attributes:
        plan: Desired width per line; None for lines captured inside a block.
        blocks: Captured text/script/style blocks in document order.
    """

    plan: IndentPlan
    blocks: list[RawBlock] = field(default_factory=list)


@dataclass(frozen=True)
class LineFacts:
    """Keyword facts about a code line, shared by both scans."""

    code: str
    is_switch_line: bool
    is_case_label: bool
    is_break: bool
    is_closing_brace: bool

    @classmethod
    def from_trimmed(cls, trimmed: str, enabled: bool = True) -> LineFacts:
        code = code_view(trimmed)
        return cls(
            code=code,
            is_switch_line=enabled and bool(SWITCH_PATTERN.match(code)),
            is_case_label=enabled and bool(CASE_PATTERN.match(code)),
            is_break=enabled and bool(BREAK_PATTERN.match(code)),
            is_closing_brace=enabled and code.startswith("}"),
        )


def opened_capture_tag(trimmed: str) -> str | None:
    """Return the block tag a line opens without closing it on the same line.

    Examples:
        opened_capture_tag("<script>")  # "script"
        opened_capture_tag("<text>Hi</text>")  # None
        opened_capture_tag("<div>")  # None
    """
    for tag_name in CAPTURE_TAGS:
        if opens_tag_line(trimmed, tag_name) and not contains_closing_tag(trimmed, tag_name):
            return tag_name
    return None


def _try_close_capture(state: NestingState, info: LineInfo, blocks: list[RawBlock]) -> bool:
    """Close the active capture when `info` carries its closing tag.

    Returns:
        bool: True when the capture was closed; False while the line is still
            inside the block and must be skipped.
    """
    capture = state.capture
    if not contains_closing_tag(info.rest, capture.tag_name):
        return False

    capture.end_line = info.index - 1
    blocks.append(capture)
    state.capture = None
    logger.debug(
        "Captured <%s> block on lines %d-%d",
        capture.tag_name,
        capture.start_line + 1,
        capture.end_line + 1,
    )
    return True


def _count_line(state: NestingState, info: LineInfo, cleaned: str) -> tuple[int, int, int, BraceCount]:
    """Accumulate tag and brace opens/closes for one line.

    Returns:
        tuple[int, int, int, BraceCount]: Opens, closes, leading closers, and
            the raw brace count (zero when braces were not scanned).
    """
    trimmed = info.rest
    leading_closings = count_leading_closings(trimmed)
    opened = 0
    closed = 0
    braces = BraceCount(in_block_comment=state.in_block_comment)

    if state.raw_tag:
        if contains_closing_tag(cleaned, state.raw_tag):
            closed += 1
            if leading_closings == 0 and closes_tag_line(trimmed, state.raw_tag):
                leading_closings = 1
            state.raw_tag = None
        return opened, closed, leading_closings, braces

    if state.state is ScannerState.IN_COMMENT:
        return opened, closed, leading_closings, braces

    if is_markup_line(trimmed):
        for tag in extract_tags(cleaned):
            if tag.is_closing:
                closed += 1
                if tag.name == state.raw_tag:
                    state.raw_tag = None
                continue
            if tag.is_self_closing:
                continue
            opened += 1
            if tag.name in RAW_TAGS:
                state.raw_tag = tag.name

    braces = count_braces(trimmed, state.in_block_comment)
    state.in_block_comment = braces.in_block_comment
    return opened + braces.opened, closed + braces.closed, leading_closings, braces


def track_structure(line_infos: list[LineInfo], indent_size: int) -> StructureScan:
    """Compute desired indentation for every line outside captured blocks.

    Walks the document once, tracking tag and brace nesting, HTML comments,
    pending script/style tags, and switch bodies. Lines inside ``<text>``,
    ``<script>`` and ``<style>`` blocks are captured into `RawBlock` records
    and left unresolved in the plan.

    Args:
        line_infos: Analyzed document lines.
        indent_size: Columns per indent unit.

    Returns:
        StructureScan: Indent plan and captured blocks. A block still open at
            the end of the document is recorded with ``skip=True``.

    Examples:
        scan = track_structure(analyze_document("<div>\\n<p>x</p>\\n</div>", 2)[0], 2)
        scan.plan  # [0, 2, 0]
    """
    plan: IndentPlan = [None] * len(line_infos)
    blocks: list[RawBlock] = []
    state = NestingState()

    for info in line_infos:
        if state.state in CAPTURING_STATES and not _try_close_capture(state, info, blocks):
            continue

        cleaned, state.in_comment = strip_html_comments(info.original, state.in_comment)
        opened, closed, leading_closings, braces = _count_line(state, info, cleaned)

        trimmed = info.rest
        facts = LineFacts.from_trimmed(trimmed, enabled=not is_markup_line(trimmed))
        switch = state.switch
        next_level = max(0, state.level - closed + opened)
        in_switch = switch.in_switch(state.level)
        case_units = switch.case_indent_units(
            state.level,
            next_level,
            is_case_label=facts.is_case_label,
            is_closing_brace=facts.is_closing_brace,
        )

        width = (max(0, state.level - leading_closings) + case_units) * indent_size
        plan[info.index] = width

        switch.advance(
            state.level,
            next_level,
            is_switch_line=facts.is_switch_line,
            is_case_label=facts.is_case_label,
            in_switch=in_switch,
            opened_braces=braces.opened,
            code=facts.code,
        )
        state.level = next_level

        tag_name = opened_capture_tag(trimmed)
        if tag_name is not None:
            state.capture = RawBlock(
                start_line=info.index + 1,
                end_line=info.index,
                tag_name=tag_name,
                parent_level=max(0, state.level - 1),
            )

    if state.capture is not None:
        state.capture.end_line = len(line_infos) - 1
        state.capture.skip = True
        blocks.append(state.capture)
        logger.debug(
            "Unterminated <%s> block from line %d; keeping original indentation",
            state.capture.tag_name,
            state.capture.start_line + 1,
        )

    return StructureScan(plan=plan, blocks=blocks)
