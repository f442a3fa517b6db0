"""Camino exception hierarchy.

All exceptions outside the template engine itself can be imported from this
package:
    from camino.exceptions import CaminoError, ConfigError, PropertyError

Template parse and render errors live with the engine in
``camino.render.errors`` and also derive from ``CaminoError``.
"""

from __future__ import annotations

# Base exception
from camino.exceptions.base import CaminoError

# Configuration exceptions
from camino.exceptions.config import ConfigError

# Property binding exceptions
from camino.exceptions.properties import PropertyError

# Function registry exceptions
from camino.exceptions.registry import (
    DuplicateFunctionError,
    FunctionNotFoundError,
    FunctionRegistryError,
)

__all__ = [
    "CaminoError",
    "ConfigError",
    "PropertyError",
    "FunctionRegistryError",
    "FunctionNotFoundError",
    "DuplicateFunctionError",
]
