"""
razor-indent: indentation formatter for Razor documents.

Recomputes only the leading whitespace of each line in documents that mix
HTML markup, Razor directives, ``@:`` text output, and embedded
``<script>``/``<style>`` code. The output is validated before it is returned:
if anything other than indentation would change, the original text is
returned with an error message.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    razor-indent Views/Home/Index.cshtml --indent-size 4

Library Usage:
    from razor_indent import format_text

    result = format_text(source, indent_size=4)
    if result.ok:
        print(result.output)
"""

from .exceptions import ContentDriftError, FormatError
from .formatter import format_text
from .models import FormatOptions, FormatResult, IndentChange, ValidationOutcome
from .validator import validate_output

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_text",
    "validate_output",
    # Data models
    "FormatOptions",
    "FormatResult",
    "IndentChange",
    "ValidationOutcome",
    # Exceptions
    "ContentDriftError",
    "FormatError",
    # Version
    "__version__",
]
