"""Output validation: only leading whitespace may change."""

from __future__ import annotations

from .constants import TEXT_PREFIX, TEXT_PREFIX_PATTERN
from .models import ValidationOutcome
from .switch import is_separator_line, normalize_switch_header

LINE_COUNT_MESSAGE = "Validation failed: line count changed."


def normalize_for_validation(line: str) -> str:
    """Normalize a line for content comparison.

    Strips leading whitespace, collapses the spacing after a ``@:`` prefix, and
    canonicalizes ``switch (...) {`` headers.

    Examples:
        normalize_for_validation("    @:   text")  # "@:text"
        normalize_for_validation("  switch(x){")  # "switch (x) {"
    """
    normalized = line.lstrip()
    if normalized.startswith(TEXT_PREFIX):
        normalized = TEXT_PREFIX_PATTERN.sub(TEXT_PREFIX, normalized, count=1)
    return normalize_switch_header(normalized)


def _failure(changed_lines: list[int]) -> ValidationOutcome:
    numbers = ", ".join(str(number) for number in changed_lines)
    return ValidationOutcome(
        ok=False,
        message=f"Validation failed: non-indentation content changed on line(s) {numbers}.",
        line_numbers=tuple(changed_lines),
    )


def validate_output(
    original_lines: list[str], output_lines: list[str], allow_insertions: bool = False
) -> ValidationOutcome:
    """Compare input and output lines after normalization.

    Without insertions, both lists must have the same length and every pair
    must match. With insertions, blank or bare ``@:`` output lines that have
    no blank counterpart in the input are skipped.

    Args:
        original_lines: Input lines without line endings.
        output_lines: Rendered lines, including inserted separators.
        allow_insertions: Whether separator lines may have been inserted.

    Returns:
        ValidationOutcome: Success, or a failure naming the offending
            one-based input line numbers.

    Examples:
        validate_output(["<div>", "<p>"], ["<div>", "  <p>"]).ok  # True
        validate_output(["a"], ["b"]).message
        # "Validation failed: non-indentation content changed on line(s) 1."
    """
    if not allow_insertions and len(original_lines) != len(output_lines):
        return ValidationOutcome(ok=False, message=LINE_COUNT_MESSAGE)

    changed_lines: list[int] = []
    original_index = 0
    output_index = 0

    while original_index < len(original_lines) and output_index < len(output_lines):
        output_line = output_lines[output_index]
        if allow_insertions and is_separator_line(output_line):
            if is_separator_line(original_lines[original_index]):
                original_index += 1
            output_index += 1
            continue

        original = normalize_for_validation(original_lines[original_index])
        formatted = normalize_for_validation(output_line)
        if original != formatted:
            changed_lines.append(original_index + 1)
        original_index += 1
        output_index += 1

    changed_lines.extend(range(original_index + 1, len(original_lines) + 1))

    if allow_insertions:
        trailing = output_lines[output_index:]
        if any(not is_separator_line(line) for line in trailing):
            changed_lines.append(len(original_lines))
    elif output_index < len(output_lines):
        return ValidationOutcome(ok=False, message=LINE_COUNT_MESSAGE)

    if changed_lines:
        return _failure(changed_lines)
    return ValidationOutcome(ok=True)
