"""Lexical helpers shared by the document and block scans."""

from __future__ import annotations

import re

from .constants import (
    CLOSING_TAG_START_PATTERN,
    DIRECTIVE_SIGIL,
    HTML_COMMENT_CLOSE,
    HTML_COMMENT_OPEN,
    LEADING_CLOSING_BRACE_PATTERN,
    LEADING_CLOSING_TAG_PATTERN,
    SELF_CLOSING_END_PATTERN,
    SKIPPED_TAG_PREFIXES,
    TAG_NAME_PATTERN,
    TAG_PATTERN,
    TEXT_PREFIX,
    TEXT_PREFIX_PATTERN,
    VOID_TAGS,
)
from .models import BraceCount, LineKind, Tag

QUOTE_CHARACTERS = "'\"`"


def strip_html_comments(line: str, in_comment: bool) -> tuple[str, bool]:
    """Remove HTML comment regions from a line.

    The comment state is carried across lines so a comment opened on one line
    keeps stripping text until its ``-->`` is found.

    Args:
        line: Line to clean.
        in_comment: Whether a comment was already open before this line.

    Returns:
        tuple[str, bool]: Text outside comments, and whether a comment is still
            open at the end of the line.

    Examples:
        strip_html_comments("<div><!-- x --></div>", False)  # ("<div></div>", False)
        strip_html_comments("<p><!-- open", False)  # ("<p>", True)
    """
    parts: list[str] = []
    index = 0

    while index < len(line):
        if in_comment:
            end = line.find(HTML_COMMENT_CLOSE, index)
            if end == -1:
                return "".join(parts), True
            index = end + len(HTML_COMMENT_CLOSE)
            in_comment = False
            continue

        start = line.find(HTML_COMMENT_OPEN, index)
        if start == -1:
            parts.append(line[index:])
            break
        parts.append(line[index:start])
        index = start + len(HTML_COMMENT_OPEN)
        in_comment = True

    return "".join(parts), in_comment


def extract_tags(line: str) -> list[Tag]:
    """Find markup tags on a comment-free line.

    Declarations, processing instructions and server tags (``<!``, ``<?``,
    ``<%``) are skipped. Void elements and ``/>`` tokens are self-closing.

    Args:
        line: Line with HTML comments already removed.

    Returns:
        list[Tag]: Tags in the order they appear.

    Examples:
        extract_tags("<div><br></div>")
        # [Tag("div", False, False), Tag("br", False, True), Tag("div", True, False)]
    """
    tags: list[Tag] = []
    for match in TAG_PATTERN.finditer(line):
        raw = match.group(0)
        if raw.startswith(SKIPPED_TAG_PREFIXES):
            continue
        name_match = TAG_NAME_PATTERN.match(raw)
        if not name_match:
            continue
        name = name_match.group(1).lower()
        tags.append(
            Tag(
                name=name,
                is_closing=bool(CLOSING_TAG_START_PATTERN.match(raw)),
                is_self_closing=bool(SELF_CLOSING_END_PATTERN.search(raw)) or name in VOID_TAGS,
            )
        )
    return tags


def contains_closing_tag(line: str, tag_name: str) -> bool:
    if not tag_name:
        return False
    return re.search(rf"<\s*/\s*{re.escape(tag_name)}\s*>", line, re.IGNORECASE) is not None


def count_leading_closings(trimmed: str) -> int:
    """Count closing tags and closing braces at the very start of a line.

    Args:
        trimmed: Line content without leading whitespace.

    Returns:
        int: Number of leading closers, consumed greedily.

    Examples:
        count_leading_closings("</li></ul>")  # 2
        count_leading_closings("@} else {")  # 1
        count_leading_closings("<div>")  # 0
    """
    count = 0
    rest = trimmed
    while True:
        tag_match = LEADING_CLOSING_TAG_PATTERN.match(rest)
        if tag_match:
            count += 1
            rest = rest[tag_match.end() :]
            continue
        brace_match = LEADING_CLOSING_BRACE_PATTERN.match(rest)
        if brace_match:
            count += 1
            rest = rest[brace_match.end() :]
            continue
        break
    return count


def count_leading_brace_closings(trimmed: str) -> int:
    """Count the run of ``}`` at the start of a line, after any ``@:`` prefix."""
    rest = TEXT_PREFIX_PATTERN.sub("", trimmed, count=1)
    return len(rest) - len(rest.lstrip("}"))


def count_braces(line: str, in_block_comment: bool = False) -> BraceCount:
    """Count code braces outside strings and comments.

    Tracks single-quoted, double-quoted and template-literal strings, ``//``
    line comments, and ``/* */`` block comments. Block comment state carries
    across lines; string state does not. A backslash inside a string escapes
    the next character.

    Args:
        line: Line content to scan.
        in_block_comment: Whether a block comment is open before this line.

    Returns:
        BraceCount: Opening and closing brace counts, and the block comment
            state at the end of the line.

    Examples:
        count_braces("if (a) {")  # BraceCount(opened=1, closed=0, in_block_comment=False)
        count_braces("x = '{';")  # BraceCount(opened=0, closed=0, in_block_comment=False)
        count_braces("} /* {")  # BraceCount(opened=0, closed=1, in_block_comment=True)
    """
    opened = 0
    closed = 0
    quote: str | None = None
    escaped = False
    i = 0

    while i < len(line):
        char = line[i]
        following = line[i + 1] if i + 1 < len(line) else ""

        if in_block_comment:
            if char == "*" and following == "/":
                in_block_comment = False
                i += 2
                continue
            i += 1
            continue

        if quote is None:
            if char == "/" and following == "*":
                in_block_comment = True
                i += 2
                continue
            if char == "/" and following == "/":
                break

        if escaped:
            escaped = False
        elif char == "\\" and quote is not None:
            escaped = True
        elif char in QUOTE_CHARACTERS:
            if quote is None:
                quote = char
            elif quote == char:
                quote = None
        elif quote is None:
            if char == "{":
                opened += 1
            elif char == "}":
                closed += 1
        i += 1

    return BraceCount(opened=opened, closed=closed, in_block_comment=in_block_comment)


def _after_text_prefix(trimmed: str) -> str | None:
    if not trimmed.startswith(TEXT_PREFIX):
        return None
    return trimmed[len(TEXT_PREFIX) :].lstrip()


def is_markup_line(trimmed: str) -> bool:
    """Whether a line starts with a tag, directly or after a ``@:`` prefix."""
    if trimmed.startswith("<"):
        return True
    after_prefix = _after_text_prefix(trimmed)
    return after_prefix is not None and after_prefix.startswith("<")


def _starts_with_tag(text: str, opener: str) -> bool:
    lowered = text.lower()
    if not lowered.startswith(opener):
        return False
    following = lowered[len(opener) : len(opener) + 1]
    return following == "" or following in ">/" or following.isspace()


def opens_tag_line(trimmed: str, tag_name: str) -> bool:
    """Whether a line begins with an opening ``<tag_name`` token."""
    opener = f"<{tag_name}"
    if _starts_with_tag(trimmed, opener):
        return True
    after_prefix = _after_text_prefix(trimmed)
    return after_prefix is not None and _starts_with_tag(after_prefix, opener)


def closes_tag_line(trimmed: str, tag_name: str) -> bool:
    """Whether a line begins with a closing ``</tag_name`` token."""
    closer = f"</{tag_name}"
    if _starts_with_tag(trimmed, closer):
        return True
    after_prefix = _after_text_prefix(trimmed)
    return after_prefix is not None and _starts_with_tag(after_prefix, closer)


def classify_line(trimmed: str) -> LineKind:
    """Classify a line by its trimmed content.

    Examples:
        classify_line("<div>")  # LineKind.MARKUP
        classify_line("@: <b>hi</b>")  # LineKind.MARKUP
        classify_line("@: hi")  # LineKind.TEXT_OUTPUT
        classify_line("@if (x) {")  # LineKind.DIRECTIVE
        classify_line("var x = 1;")  # LineKind.CODE
    """
    if not trimmed:
        return LineKind.BLANK
    if is_markup_line(trimmed):
        return LineKind.MARKUP
    if trimmed.startswith(TEXT_PREFIX):
        return LineKind.TEXT_OUTPUT
    if trimmed.startswith(DIRECTIVE_SIGIL):
        return LineKind.DIRECTIVE
    return LineKind.CODE


def code_view(trimmed: str) -> str:
    """Return the part of a line inspected for ``switch``/``case``/``break``.

    Text-output lines expose the text after their prefix, directive lines
    expose nothing, and plain lines are returned unchanged.
    """
    after_prefix = _after_text_prefix(trimmed)
    if after_prefix is not None:
        return after_prefix
    if trimmed.startswith(DIRECTIVE_SIGIL):
        return ""
    return trimmed
