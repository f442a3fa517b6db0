"""Output formatting utilities for the Camino CLI."""

from __future__ import annotations

from enum import IntEnum

from camino.exceptions import CaminoError, ConfigError
from camino.render.errors import ParseError, RenderError, TemplateError

__all__ = [
    "ExitCode",
    "format_error",
    "format_success",
    "format_config_error",
    "format_template_error",
]


class ExitCode(IntEnum):
    """Standard exit codes for the Camino CLI."""

    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Bad template", details=["line 1"]))
        Error: Bad template
          line 1
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_success(message: str) -> str:
    """Format a success message.

    Example:
        >>> format_success("Template is valid")
        'Success: Template is valid'
    """
    return f"Success: {message}"


def format_config_error(error: ConfigError) -> str:
    """Format a configuration error with the offending field and value."""
    details: list[str] = []
    if error.field:
        details.append(f"Field: {error.field}")
    if error.value is not None:
        details.append(f"Value: {error.value}")
    return format_error(
        error.message,
        details=details,
        suggestion="Check camino.yaml and CAMINO_* environment variables.",
    )


def _source_line(source: str, line: int) -> str | None:
    lines = source.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return None


def format_template_error(error: CaminoError, source: str | None = None) -> str:
    """Format a Camino error, pointing at the failing source position.

    For template errors with a known location, the offending source line is
    shown with a caret under the column.
    """
    if not isinstance(error, TemplateError):
        return format_error(error.message)

    if isinstance(error, ParseError):
        prefix = "Syntax error"
    elif isinstance(error, RenderError):
        prefix = f"{error.kind.value}"
    else:
        prefix = "Template error"

    details: list[str] = []
    if error.location is not None:
        details.append(f"at {error.location}")
        line = _source_line(source, error.location.line) if source else None
        if line is not None:
            details.append(line)
            details.append(" " * (error.location.column - 1) + "^")
    return format_error(f"{prefix}: {error.reason}", details=details)
