from __future__ import annotations

from pathlib import Path

from camino.exceptions.base import CaminoError


class PropertyError(CaminoError):
    """Exception raised when property bindings cannot be loaded.

    Raised for unreadable or malformed property files and for ``name=value``
    assignments that do not name a property.

    Attributes:
        message: Human-readable error message.
        source: File the property came from, if any.
    """

    def __init__(self, message: str, source: Path | None = None) -> None:
        self.source = source
        if source is not None:
            message = f"{message} ({source})"
        super().__init__(message)
