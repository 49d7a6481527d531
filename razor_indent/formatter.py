"""Indentation formatter for Razor documents."""

from __future__ import annotations

import logging

from .blocks import BlockLayout, reindent_blocks
from .constants import TEXT_OUTPUT_LINE_PATTERN, TEXT_PREFIX
from .lines import analyze_document, sanitize_indent_size
from .models import FormatOptions, FormatResult, IndentChange, IndentPlan, LineInfo
from .switch import insert_switch_separators, normalize_switch_header
from .tracker import track_structure
from .validator import validate_output

logger = logging.getLogger(__name__)


def render_line(rest: str, width: int) -> str:
    if width <= 0:
        return rest
    return f"{' ' * width}{rest}"


def render_text_output_line(rest: str, width: int, content_indent: int) -> str:
    """Render a ``@:`` line with its prefix at `width` and content offset after it.

    Examples:
        render_text_output_line("@:   case 1:", 4, 2)  # "    @:   case 1:"
        render_text_output_line("@:", 4, 0)  # "    @:"
    """
    match = TEXT_OUTPUT_LINE_PATTERN.match(rest)
    if not match:
        return render_line(rest, width)
    content = match.group(2)
    indent = " " * max(0, width)
    if not content:
        return f"{indent}{TEXT_PREFIX}"
    return f"{indent}{TEXT_PREFIX} {' ' * content_indent}{content.lstrip()}"


def render_lines(line_infos: list[LineInfo], plan: IndentPlan, layout: BlockLayout) -> list[str]:
    rendered = []
    for info in line_infos:
        width = plan[info.index]
        if width is None:
            width = info.leading_width
        if layout.text_prefix[info.index]:
            rendered.append(
                render_text_output_line(info.rest, width, layout.content_indents[info.index])
            )
            continue
        rest = info.rest
        meta = layout.meta[info.index]
        if meta is not None and meta.is_raw_block:
            rest = normalize_switch_header(rest)
        rendered.append(render_line(rest, width))
    return rendered


def collect_changes(line_infos: list[LineInfo], plan: IndentPlan) -> list[IndentChange]:
    changes = []
    for info in line_infos:
        after = plan[info.index]
        if after is not None and after != info.leading_width:
            changes.append(IndentChange(info.index + 1, info.leading_width, after))
    return changes or [IndentChange.no_changes()]


def format_text(
    text: str,
    options: FormatOptions | None = None,
    *,
    indent_size: object = None,
    adjust_text_blocks: bool | None = None,
) -> FormatResult:
    """Recompute the leading indentation of every line in a Razor document.

    Tracks markup tags, code braces, HTML and block comments, and
    ``<text>``/``<script>``/``<style>`` blocks to decide each line's
    indentation. Inside script/style blocks, statements under ``case`` labels
    get one extra level and a separator is inserted between ``break`` and the
    next label. The output is validated against the input before being
    returned; any content drift discards it.

    Args:
        text: Document to format.
        options: Formatting options; defaults to `FormatOptions()`.
        indent_size: Override for `options.indent_size` when not None.
        adjust_text_blocks: Override for `options.adjust_text_blocks` when not None.

    Returns:
        FormatResult: The reformatted text and change log, or the original
            text with an error message when validation fails.

    Examples:
        format_text("<div>\\n<p>x</p>\\n</div>", indent_size=4).output
        # "<div>\\n    <p>x</p>\\n</div>"
    """
    options = options or FormatOptions()
    if indent_size is None:
        indent_size = options.indent_size
    if adjust_text_blocks is None:
        adjust_text_blocks = options.adjust_text_blocks
    indent_size = sanitize_indent_size(indent_size)
    adjust_text_blocks = bool(adjust_text_blocks)

    line_infos, line_ending = analyze_document(text, indent_size)
    scan = track_structure(line_infos, indent_size)
    plan = scan.plan
    layout = reindent_blocks(scan.blocks, plan, line_infos, indent_size, adjust_text_blocks)

    for info in line_infos:
        if plan[info.index] is None:
            plan[info.index] = info.leading_width

    rendered = render_lines(line_infos, plan, layout)
    output_lines, inserted = insert_switch_separators(rendered, layout.meta)

    outcome = validate_output(
        [info.original for info in line_infos], output_lines, allow_insertions=inserted > 0
    )
    if not outcome.ok:
        logger.warning("%s Returning the original text.", outcome.message)
        return FormatResult(output=text, error=outcome.message, error_lines=outcome.line_numbers)

    logger.debug("Validation ok: non-leading content unchanged.")
    return FormatResult(
        output=line_ending.join(output_lines),
        changes=collect_changes(line_infos, plan),
    )
