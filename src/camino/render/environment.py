"""Lexical environments for template evaluation.

An ``Environment`` is one immutable frame of bindings plus a reference to its
parent frame. Lookups walk outward from the innermost frame; the first frame
that binds a name wins. Extending a scope always creates a new child frame,
so a frame captured by a closure is never changed by later evaluation.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from camino.render.values import Value

if TYPE_CHECKING:
    from camino.properties import Property

__all__ = ["Environment"]


class Environment:
    """One frame in a chain of lexical scopes.

    Example:
        ```python
        root = Environment.from_properties([Property(name="env", value="prod")])
        scope = root.child({"x": 1})
        scope.lookup("env")  # "prod"
        ```
    """

    __slots__ = ("_bindings", "_parent")

    def __init__(
        self,
        bindings: Mapping[str, Value] | None = None,
        parent: Environment | None = None,
    ) -> None:
        self._bindings: Mapping[str, Value] = MappingProxyType(dict(bindings or {}))
        self._parent = parent

    @classmethod
    def from_properties(
        cls, properties: Iterable[Property] | Mapping[str, str]
    ) -> Environment:
        """Create a root frame binding each property name to its string value.

        When a name occurs more than once, the last binding wins.

        Args:
            properties: Property objects, or a plain name-to-value mapping.

        Returns:
            A new root Environment.
        """
        if isinstance(properties, Mapping):
            return cls({name: str(value) for name, value in properties.items()})
        return cls({prop.name: prop.value for prop in properties})

    @property
    def parent(self) -> Environment | None:
        return self._parent

    @property
    def bindings(self) -> Mapping[str, Value]:
        """Read-only view of this frame's own bindings."""
        return self._bindings

    def child(self, bindings: Mapping[str, Value]) -> Environment:
        """Create a new frame whose parent is this one."""
        return Environment(bindings, parent=self)

    def lookup(self, name: str) -> Value:
        """Resolve ``name``, innermost frame first.

        Raises:
            KeyError: If no frame in the chain binds the name.
        """
        for frame in self.frames():
            if name in frame._bindings:
                return frame._bindings[name]
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(name in frame._bindings for frame in self.frames())

    def frames(self) -> Iterator[Environment]:
        """Iterate from this frame out to the root."""
        frame: Environment | None = self
        while frame is not None:
            yield frame
            frame = frame._parent

    def names(self) -> frozenset[str]:
        """All names visible from this frame."""
        return frozenset(name for frame in self.frames() for name in frame._bindings)

    def __repr__(self) -> str:
        depth = sum(1 for _ in self.frames())
        return f"Environment(names={sorted(self._bindings)!r}, depth={depth})"
