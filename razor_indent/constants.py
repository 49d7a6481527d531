"""Constants used across the razor-indent package."""

from __future__ import annotations

import re

DEFAULT_INDENT_SIZE = 2
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
SUPPORTED_EXTENSIONS = (".cshtml", ".razor", ".html", ".htm")

# Markup vocabulary
VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
RAW_TAGS = frozenset({"script", "style"})
TEXT_TAG = "text"
# Only the leading tag of a line can open a block, so at most one of these matches.
CAPTURE_TAGS = (TEXT_TAG, "script", "style")

HTML_COMMENT_OPEN = "<!--"
HTML_COMMENT_CLOSE = "-->"

# Razor syntax
DIRECTIVE_SIGIL = "@"
TEXT_PREFIX = "@:"

# Markup patterns
TAG_PATTERN = re.compile(r"<[^>]+>")
TAG_NAME_PATTERN = re.compile(r"^<\s*/?\s*([a-zA-Z0-9:-]+)")
CLOSING_TAG_START_PATTERN = re.compile(r"^<\s*/")
SELF_CLOSING_END_PATTERN = re.compile(r"/>\s*$")
LEADING_CLOSING_TAG_PATTERN = re.compile(r"^<\s*/\s*[a-zA-Z0-9:-]+[^>]*>\s*")
LEADING_CLOSING_BRACE_PATTERN = re.compile(r"^@?\}\s*")
SKIPPED_TAG_PREFIXES = ("<!", "<?", "<%")

# Code patterns
SWITCH_PATTERN = re.compile(r"^switch\s*\(")
SWITCH_HEADER_PATTERN = re.compile(r"^switch\s*\((.*)\)\s*\{\s*$", re.DOTALL)
CASE_PATTERN = re.compile(r"^(?:case|default)\b")
BREAK_PATTERN = re.compile(r"^break\b")

# Text-output patterns
TEXT_PREFIX_PATTERN = re.compile(r"^@:\s*")
TEXT_OUTPUT_LINE_PATTERN = re.compile(r"^@:(\s*)(.*)$", re.DOTALL)
TEXT_OUTPUT_INDENT_PATTERN = re.compile(r"^(\s*)@:")

LINE_SPLIT_PATTERN = re.compile(r"\r\n|\n")
