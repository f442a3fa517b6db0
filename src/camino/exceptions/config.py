from __future__ import annotations

from typing import Any

from camino.exceptions.base import CaminoError


class ConfigError(CaminoError):
    """Raised when settings cannot be read or fail validation.

    Covers malformed YAML in ``camino.yaml`` or the user config file, a
    config file that is not a mapping, and out-of-range values from any
    source, including ``CAMINO_*`` environment variables.

    Attributes:
        field: Dotted path of the offending setting, e.g.
            ``"render.max_call_depth"``, when known.
        value: The rejected value, when known.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
