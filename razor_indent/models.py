"""Data models for razor-indent."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .constants import DEFAULT_INDENT_SIZE, RAW_TAGS
from .exceptions import ContentDriftError

# Desired indentation width per line; None falls back to the original width.
IndentPlan = list[int | None]


class ScannerState(Enum):
    """Scanner states used while walking a document.

    Attributes:
        NORMAL: Default state for markup and directive lines.
        IN_COMMENT: Inside an unterminated HTML comment.
        IN_TEXT_BLOCK: Capturing the inner lines of a ``<text>`` block.
        IN_RAW_BLOCK: Capturing the inner lines of a ``<script>`` or ``<style>`` block.
    """

    NORMAL = auto()
    IN_COMMENT = auto()
    IN_TEXT_BLOCK = auto()
    IN_RAW_BLOCK = auto()


class LineKind(Enum):
    """Classification of a line by its trimmed content."""

    BLANK = auto()
    MARKUP = auto()
    TEXT_OUTPUT = auto()
    DIRECTIVE = auto()
    CODE = auto()


@dataclass(frozen=True)
class LineInfo:
    """A single line of the input document.

    Attributes:
        index: Zero-based line index.
        original: Line text without its line ending.
        leading: Leading whitespace run.
        rest: Content following the leading whitespace.
        leading_width: Column width of `leading`; tabs count as one indent unit.
    """

    index: int
    original: str
    leading: str
    rest: str
    leading_width: int


@dataclass(frozen=True)
class Tag:
    """A bracket-delimited markup token found on a line."""

    name: str
    is_closing: bool
    is_self_closing: bool


@dataclass(frozen=True)
class BraceCount:
    """Result of scanning a line for code braces."""

    opened: int = 0
    closed: int = 0
    in_block_comment: bool = False


@dataclass
class SwitchFrame:
    """One open ``switch`` body.

    Attributes:
        depth: Nesting level at which the body began.
        case_depth: Level of the most recent case/default label in this body.
    """

    depth: int
    case_depth: int | None = None


@dataclass
class SwitchTracker:
    """Track ``switch`` bodies and ``case`` labels during a scan.

    Each open switch keeps its own case level, so a switch nested under a
    ``case`` label does not lose the outer label's indentation.

    Attributes:
        frames: Open switch bodies, innermost last.
        pending: Whether a ``switch (...)`` header is waiting for its brace.
    """

    frames: list[SwitchFrame] = field(default_factory=list)
    pending: bool = False

    @property
    def depths(self) -> list[int]:
        return [frame.depth for frame in self.frames]

    @property
    def case_depth(self) -> int | None:
        return self.frames[-1].case_depth if self.frames else None

    def in_switch(self, level: int) -> bool:
        return bool(self.frames) and level >= self.frames[-1].depth

    def case_indent_units(
        self, level: int, next_level: int, *, is_case_label: bool, is_closing_brace: bool
    ) -> int:
        """Count the extra indent units a line gets from enclosing case labels.

        A switch body contributes one unit once it has seen a label, except on
        the label lines of the innermost switch and on a brace that closes the
        body.

        Examples:
            tracker = SwitchTracker([SwitchFrame(1, 1), SwitchFrame(2, 2)])
            tracker.case_indent_units(2, 2, is_case_label=False, is_closing_brace=False)  # 2
            tracker.case_indent_units(2, 2, is_case_label=True, is_closing_brace=False)  # 1
        """
        units = 0
        innermost = len(self.frames) - 1
        for position, frame in enumerate(self.frames):
            if frame.case_depth is None or level < frame.depth:
                continue
            if position == innermost and is_case_label:
                continue
            if is_closing_brace and next_level < frame.depth:
                continue
            units += 1
        return units

    def advance(
        self,
        level: int,
        next_level: int,
        *,
        is_switch_line: bool,
        is_case_label: bool,
        in_switch: bool,
        opened_braces: int,
        code: str,
    ) -> None:
        """Apply the push/pop/clear rules after a line has been measured.

        Args:
            level: Nesting level before the line.
            next_level: Nesting level after the line.
            is_switch_line: Whether the line starts with a ``switch (`` header.
            is_case_label: Whether the line starts with ``case`` or ``default``.
            in_switch: Whether the line was inside a switch body.
            opened_braces: Number of braces opened on the line.
            code: Code portion of the line inspected for keywords.

        Examples:
            tracker = SwitchTracker()
            tracker.advance(0, 1, is_switch_line=True, is_case_label=False,
                            in_switch=False, opened_braces=1, code="switch (x) {")
            tracker.depths  # [1]
        """
        if in_switch and is_case_label:
            self.frames[-1].case_depth = level

        pending_set_this_line = False
        if is_switch_line:
            if opened_braces > 0:
                self.frames.append(SwitchFrame(next_level))
                self.pending = False
            else:
                self.pending = True
                pending_set_this_line = True

        # Brace on a later line: `switch (x)` followed by `{`
        if self.pending and opened_braces > 0 and code.startswith("{"):
            self.frames.append(SwitchFrame(next_level))
            self.pending = False
        if not pending_set_this_line and self.pending and code and not code.startswith("{"):
            self.pending = False

        while self.frames and next_level < self.frames[-1].depth:
            self.frames.pop()
        for frame in self.frames:
            if frame.case_depth is not None and next_level < frame.case_depth:
                frame.case_depth = None


@dataclass
class RawBlock:
    """Inner line range of a ``<text>``, ``<script>`` or ``<style>`` block.

    Attributes:
        start_line: First inner line (the line after the opening tag).
        end_line: Last inner line (the line before the closing tag).
        tag_name: Lowercase name of the capturing tag.
        parent_level: Nesting level of the enclosing markup.
        skip: True when no closing tag was found before the end of the document.
    """

    start_line: int
    end_line: int
    tag_name: str
    parent_level: int
    skip: bool = False

    @property
    def is_code_block(self) -> bool:
        return self.tag_name in RAW_TAGS

    def line_range(self) -> range:
        return range(self.start_line, self.end_line + 1)


@dataclass
class NestingState:
    """Mutable state threaded through a document scan.

    Attributes:
        level: Current brace/tag nesting level; never negative.
        in_comment: Whether an HTML comment is open.
        raw_tag: Name of a script/style tag awaiting its closing tag.
        in_block_comment: Whether a ``/* */`` code comment is open.
        switch: Switch/case bookkeeping.
        capture: Block whose inner lines are being captured, if any.
    """

    level: int = 0
    in_comment: bool = False
    raw_tag: str | None = None
    in_block_comment: bool = False
    switch: SwitchTracker = field(default_factory=SwitchTracker)
    capture: RawBlock | None = None

    @property
    def state(self) -> ScannerState:
        if self.capture is not None:
            if self.capture.is_code_block:
                return ScannerState.IN_RAW_BLOCK
            return ScannerState.IN_TEXT_BLOCK
        if self.in_comment:
            return ScannerState.IN_COMMENT
        return ScannerState.NORMAL


@dataclass(frozen=True)
class RawLineMeta:
    """Facts about a line inside a script/style block, used for switch spacing."""

    is_raw_block: bool = True
    is_case_or_default: bool = False
    is_break: bool = False


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of comparing input and output lines.

    Attributes:
        ok: True when only permitted whitespace changes were found.
        message: Diagnostic naming the offending line(s); empty on success.
        line_numbers: One-based numbers of the offending input lines.
    """

    ok: bool
    message: str = ""
    line_numbers: tuple[int, ...] = ()


NO_CHANGES_MESSAGE = "No indentation changes detected."


@dataclass(frozen=True)
class IndentChange:
    """One change-log record.

    A record without a line number is the informational "no changes" entry.
    """

    line_number: int | None
    before: int | None = None
    after: int | None = None

    @classmethod
    def no_changes(cls) -> IndentChange:
        return cls(line_number=None)

    def __str__(self) -> str:
        if self.line_number is None:
            return NO_CHANGES_MESSAGE
        return f"Line {self.line_number}: {self.before} -> {self.after}"


@dataclass(frozen=True)
class FormatOptions:
    """Options accepted by `format_text`.

    Attributes:
        indent_size: Columns per indent unit; invalid values fall back to 2.
        adjust_text_blocks: Recompute indentation inside text/script/style
            blocks; when False their inner lines keep their original widths.
    """

    indent_size: int = DEFAULT_INDENT_SIZE
    adjust_text_blocks: bool = True


@dataclass
class FormatResult:
    """Outcome of a formatting run.

    Attributes:
        output: Reindented document, or the original text on failure.
        changes: Per-line width changes in ascending line order.
        error: Validation diagnostic, or None on success.
    """

    output: str
    changes: list[IndentChange] = field(default_factory=list)
    error: str | None = None
    error_lines: tuple[int, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise ContentDriftError(self.error, self.error_lines)
