"""Package-specific exception types."""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for formatting-related errors.

    Represents errors encountered while reindenting Razor content.
    """


class ContentDriftError(FormatError):
    """Raised when reindentation would change more than leading whitespace.

    Args:
        message: Diagnostic produced by the output validator.
        line_numbers: One-based numbers of the offending input lines.
    """

    def __init__(self, message: str, line_numbers: tuple[int, ...] = ()):
        self.line_numbers = line_numbers
        super().__init__(message)
