"""Template-specific error types for the Camino engine.

Two disjoint phases can fail:

- Parsing raises ``ParseError`` (``LexicalError`` for malformed characters or
  unterminated strings). The first error aborts the parse; no partial tree is
  produced.
- Evaluation raises a ``RenderError`` subclass, one per ``RenderErrorKind``.

Every error carries the ``Location`` of the token or node where it originated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from camino.exceptions import CaminoError

__all__ = [
    "Location",
    "TemplateError",
    "ParseError",
    "LexicalError",
    "RenderErrorKind",
    "RenderError",
    "UnresolvedReferenceError",
    "TypeMismatchError",
    "MemberNotFoundError",
    "IndexOutOfRangeError",
    "ArityMismatchError",
    "FunctionCallError",
    "CallDepthExceededError",
]


@dataclass(frozen=True, slots=True)
class Location:
    """A 1-based (line, column) position in template source text."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class TemplateError(CaminoError):
    """Base exception for all template parsing and rendering errors.

    Attributes:
        message: Full message, including the location when known.
        reason: The message without location information.
        location: Where in the template the error originated.
    """

    def __init__(self, message: str, location: Location | None = None) -> None:
        self.reason = message
        self.location = location
        if location is not None:
            message = f"{message} at {location}"
        super().__init__(message)


class ParseError(TemplateError):
    """Exception raised when template text does not match the grammar.

    Attributes:
        expected: Description of what the parser expected, if known.
    """

    def __init__(
        self,
        message: str,
        location: Location | None = None,
        expected: str | None = None,
    ) -> None:
        self.expected = expected
        super().__init__(message, location)


class LexicalError(ParseError):
    """Exception raised for unrecognized characters or unterminated strings."""


class RenderErrorKind(str, Enum):
    """Kind of evaluation failure."""

    UNRESOLVED_REFERENCE = "UnresolvedReference"
    TYPE_MISMATCH = "TypeMismatch"
    MEMBER_NOT_FOUND = "MemberNotFound"
    INDEX_OUT_OF_RANGE = "IndexOutOfRange"
    ARITY_MISMATCH = "ArityMismatch"
    FUNCTION_CALL_EXCEPTION = "FunctionCallException"
    CALL_DEPTH_EXCEEDED = "CallDepthExceeded"


class RenderError(TemplateError):
    """Exception raised when a parsed template fails during evaluation.

    Subclasses set ``kind``; callers may either catch the subclass or
    inspect ``kind`` on a caught ``RenderError``.

    Attributes:
        kind: The failure category.
    """

    kind: RenderErrorKind


class UnresolvedReferenceError(RenderError):
    """An identifier is bound in no environment frame and no registry entry.

    Attributes:
        name: The identifier that could not be resolved.
    """

    kind = RenderErrorKind.UNRESOLVED_REFERENCE

    def __init__(self, name: str, location: Location | None = None) -> None:
        self.name = name
        super().__init__(f"Unresolved reference '{name}'", location)


class TypeMismatchError(RenderError):
    """An operation received a value of the wrong type."""

    kind = RenderErrorKind.TYPE_MISMATCH


class MemberNotFoundError(RenderError):
    """A dictionary has no entry for the requested member or key.

    Attributes:
        key: The key that was looked up.
    """

    kind = RenderErrorKind.MEMBER_NOT_FOUND

    def __init__(self, key: object, location: Location | None = None) -> None:
        self.key = key
        super().__init__(f"Member {key!r} not found", location)


class IndexOutOfRangeError(RenderError):
    """A list index is negative or past the end of the list.

    Attributes:
        index: The offending index.
        length: Length of the indexed list.
    """

    kind = RenderErrorKind.INDEX_OUT_OF_RANGE

    def __init__(
        self, index: int, length: int, location: Location | None = None
    ) -> None:
        self.index = index
        self.length = length
        super().__init__(
            f"Index {index} out of range for list of length {length}", location
        )


class ArityMismatchError(RenderError):
    """A closure was called with the wrong number of arguments.

    Attributes:
        expected: Number of declared parameters.
        actual: Number of arguments supplied.
    """

    kind = RenderErrorKind.ARITY_MISMATCH

    def __init__(
        self, expected: int, actual: int, location: Location | None = None
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Function expects {expected} argument(s) but was called with {actual}",
            location,
        )


class FunctionCallError(RenderError):
    """A built-in function rejected its arguments or failed while running.

    The underlying exception is available as ``cause`` and is also chained
    as ``__cause__``.

    Attributes:
        function: Name of the function that failed.
        cause: The original exception, if any.
    """

    kind = RenderErrorKind.FUNCTION_CALL_EXCEPTION

    def __init__(
        self,
        function: str,
        message: str,
        location: Location | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.function = function
        self.cause = cause
        super().__init__(f"Call to '{function}' failed: {message}", location)


class CallDepthExceededError(RenderError):
    """Nested function calls exceeded the configured maximum depth.

    Attributes:
        max_depth: The limit that was exceeded.
    """

    kind = RenderErrorKind.CALL_DEPTH_EXCEEDED

    def __init__(self, max_depth: int, location: Location | None = None) -> None:
        self.max_depth = max_depth
        super().__init__(f"Maximum call depth of {max_depth} exceeded", location)
