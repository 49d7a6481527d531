"""Re-indentation of lines captured inside text, script and style blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .constants import TEXT_PREFIX
from .models import IndentPlan, LineInfo, LineKind, RawBlock, RawLineMeta, SwitchTracker
from .scanner import classify_line, count_braces, count_leading_brace_closings
from .tracker import LineFacts

logger = logging.getLogger(__name__)


@dataclass
class BlockLayout:
    """Per-line rendering hints produced while reindenting blocks.

    Attributes:
        text_prefix: Lines rendered as ``@:`` text output with a content offset.
        content_indents: Extra columns placed after the ``@: `` prefix.
        meta: Switch facts for lines inside script/style blocks.
    """

    text_prefix: list[bool]
    content_indents: list[int]
    meta: list[RawLineMeta | None]

    @classmethod
    def empty(cls, line_count: int) -> BlockLayout:
        return cls(
            text_prefix=[False] * line_count,
            content_indents=[0] * line_count,
            meta=[None] * line_count,
        )


def restore_original_indent(block: RawBlock, plan: IndentPlan, line_infos: list[LineInfo]) -> None:
    for index in block.line_range():
        plan[index] = line_infos[index].leading_width


def is_ambiguous_remix(block: RawBlock, line_infos: list[LineInfo]) -> bool:
    """Detect a block that mixes Razor directives with plain code lines.

    A directive is any ``@`` line other than ``@:`` text output; lines inside
    the braces a directive opens belong to that directive. A plain line
    outside every directive region, together with at least one directive,
    makes the block ambiguous.

    Args:
        block: Captured block to inspect.
        line_infos: Analyzed document lines.

    Returns:
        bool: True when the block's indentation should be left untouched.

    Examples:
        # "var a = 1;" followed by "@if (x) {" inside <script> -> True
        # only "@: ..." lines inside <script> -> False
    """
    has_directive = False
    has_plain_line = False
    directive_depth = 0

    for index in block.line_range():
        rest = line_infos[index].rest
        kind = classify_line(rest)
        if kind is LineKind.BLANK:
            continue
        is_directive = kind is LineKind.DIRECTIVE
        in_directive_region = directive_depth > 0 or is_directive

        if is_directive:
            has_directive = True
        elif not rest.startswith("@") and not in_directive_region:
            has_plain_line = True

        if in_directive_region:
            braces = count_braces(rest)
            directive_depth = max(0, directive_depth + braces.opened - braces.closed)
        if has_directive and has_plain_line:
            return True

    return False


def _reindent_block(
    block: RawBlock,
    plan: IndentPlan,
    line_infos: list[LineInfo],
    indent_size: int,
    layout: BlockLayout,
) -> None:
    is_code = block.is_code_block
    # A top-level script/style body stays flush with its tags.
    offset = 0 if is_code and block.parent_level == 0 else indent_size
    base_indent = block.parent_level * indent_size + offset

    switch = SwitchTracker()
    level = 0
    in_block_comment = False
    group_base_level: int | None = None

    for index in block.line_range():
        rest = line_infos[index].rest
        if not rest:
            plan[index] = 0
            group_base_level = None
            if is_code:
                layout.meta[index] = RawLineMeta()
            continue

        effective_level = max(0, level - (1 if count_leading_brace_closings(rest) else 0))
        facts = LineFacts.from_trimmed(rest, enabled=is_code)
        braces = count_braces(rest, in_block_comment)
        next_level = max(0, level + braces.opened - braces.closed)
        in_switch = is_code and switch.in_switch(level)
        case_indent = indent_size * switch.case_indent_units(
            level,
            next_level,
            is_case_label=facts.is_case_label,
            is_closing_brace=facts.is_closing_brace,
        )

        width = base_indent + effective_level * indent_size + case_indent

        if is_code and rest.startswith(TEXT_PREFIX):
            if group_base_level is None:
                group_base_level = effective_level
            width = base_indent + group_base_level * indent_size
            content_indent = max(0, (effective_level - group_base_level) * indent_size) + case_indent
            layout.text_prefix[index] = True
            layout.content_indents[index] = content_indent
        elif is_code:
            group_base_level = None
        plan[index] = width

        if is_code:
            layout.meta[index] = RawLineMeta(
                is_case_or_default=in_switch and facts.is_case_label,
                is_break=in_switch and facts.is_break,
            )

        in_block_comment = braces.in_block_comment
        switch.advance(
            level,
            next_level,
            is_switch_line=facts.is_switch_line,
            is_case_label=facts.is_case_label,
            in_switch=in_switch,
            opened_braces=braces.opened,
            code=facts.code,
        )
        level = next_level


def reindent_blocks(
    blocks: list[RawBlock],
    plan: IndentPlan,
    line_infos: list[LineInfo],
    indent_size: int,
    adjust_text_blocks: bool = True,
) -> BlockLayout:
    """Fill in the plan for lines captured inside blocks.

    Each block is reindented as a sub-document offset from its parent markup.
    Unterminated blocks, ambiguous script/style blocks, and every block when
    `adjust_text_blocks` is False keep their original widths.

    Args:
        blocks: Blocks captured by `track_structure`.
        plan: Indent plan updated in place.
        line_infos: Analyzed document lines.
        indent_size: Columns per indent unit.
        adjust_text_blocks: Whether block contents are recomputed at all.

    Returns:
        BlockLayout: Text-output rendering hints and switch facts.
    """
    layout = BlockLayout.empty(len(line_infos))

    for block in blocks:
        if not adjust_text_blocks or block.skip or block.end_line < block.start_line:
            restore_original_indent(block, plan, line_infos)
            continue
        if block.is_code_block and is_ambiguous_remix(block, line_infos):
            logger.debug(
                "Mixed directive and plain lines in <%s> block at line %d; keeping original indentation",
                block.tag_name,
                block.start_line + 1,
            )
            restore_original_indent(block, plan, line_infos)
            continue
        _reindent_block(block, plan, line_infos, indent_size, layout)

    return layout
