"""Property bindings that seed a template's root environment.

A property is an immutable (name, value) string pair. Properties come from
YAML files or ``name=value`` assignments on the command line and are bound
verbatim, as strings, in the root environment frame.

Property files are either a mapping::

    env: prod
    region: us-east-1

or a list of entries::

    - name: env
      value: prod
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from camino.exceptions import PropertyError
from camino.logging import get_logger

__all__ = ["Property", "parse_assignment", "load_properties", "merge_properties"]

logger = get_logger(__name__)


class Property(BaseModel):
    """An immutable (name, value) string pair.

    Attributes:
        name: Variable name templates refer to.
        value: String value bound to the name.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    value: str


def _scalar_text(name: str, value: Any, source: Path | None) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    raise PropertyError(
        f"Property '{name}' must be a scalar, got {type(value).__name__}", source
    )


def _make(name: Any, value: Any, source: Path | None) -> Property:
    try:
        return Property(name=str(name), value=_scalar_text(str(name), value, source))
    except ValidationError as e:
        raise PropertyError(f"Invalid property '{name}': {e}", source) from e


def parse_assignment(assignment: str) -> Property:
    """Parse a ``name=value`` assignment.

    The value is everything after the first ``=`` and may be empty.

    Raises:
        PropertyError: If there is no ``=`` or the name is empty.

    Examples:
        >>> parse_assignment("date=2024-01-01").value
        '2024-01-01'
    """
    name, separator, value = assignment.partition("=")
    name = name.strip()
    if not separator or not name:
        raise PropertyError(f"Expected name=value, got '{assignment}'")
    return Property(name=name, value=value)


def load_properties(path: Path) -> tuple[Property, ...]:
    """Load properties from a YAML file.

    Args:
        path: File holding a mapping or a list of name/value entries.

    Returns:
        Properties in file order.

    Raises:
        PropertyError: If the file cannot be read or is malformed.
    """
    try:
        with open(path) as f:
            loaded = yaml.safe_load(f)
    except OSError as e:
        raise PropertyError(f"Cannot read property file: {e.strerror}", path) from e
    except yaml.YAMLError as e:
        raise PropertyError(f"Invalid YAML: {e}", path) from e

    if loaded is None:
        logger.warning("property_file_empty", path=str(path))
        return ()

    if isinstance(loaded, dict):
        properties = tuple(_make(k, v, path) for k, v in loaded.items())
    elif isinstance(loaded, list):
        entries: list[Property] = []
        for entry in loaded:
            if not isinstance(entry, dict) or "name" not in entry:
                raise PropertyError(
                    "List entries must be mappings with 'name' and 'value'", path
                )
            entries.append(_make(entry["name"], entry.get("value"), path))
        properties = tuple(entries)
    else:
        raise PropertyError("Property file must hold a mapping or a list", path)

    logger.debug("properties_loaded", path=str(path), count=len(properties))
    return properties


def merge_properties(*groups: Iterable[Property]) -> tuple[Property, ...]:
    """Concatenate property groups in order.

    Names are not deduplicated here. ``Environment.from_properties`` binds
    them in sequence, so a later group overrides an earlier name there.
    """
    return tuple(prop for group in groups for prop in group)
