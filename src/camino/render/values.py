"""Runtime value model for Camino templates.

Values are plain Python objects:

==================  =========================================
Template type       Python representation
==================  =========================================
Integer             ``int`` (never ``bool``)
Float               ``float``
String              ``str``
Boolean             ``bool``
List                ``tuple`` (list literals) or ``list``
Dictionary          ``Dictionary``, or a host ``Mapping``
Closure             ``Closure``
BuiltinFunction     ``BuiltinFunction``
==================  =========================================

The evaluator never mutates a value once it has been produced.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

from camino.render.nodes import Block

if TYPE_CHECKING:
    from camino.render.environment import Environment

__all__ = [
    "Value",
    "Closure",
    "BuiltinFunction",
    "Dictionary",
    "dictionary_key",
    "lookup_key",
    "is_integer",
    "is_float",
    "is_list",
    "is_dictionary",
    "is_callable",
    "is_value",
    "type_name",
    "to_text",
]


@dataclass(frozen=True, slots=True)
class Closure:
    """A function value created by evaluating a function literal.

    Attributes:
        parameters: Parameter names, in declaration order.
        body: Single-expression ``Block`` evaluated on each call.
        environment: Frame captured where the literal was evaluated.
    """

    parameters: tuple[str, ...]
    body: Block
    environment: Environment = field(compare=False, repr=False)

    def __str__(self) -> str:
        return f"<fn({', '.join(self.parameters)})>"


@dataclass(frozen=True, slots=True)
class BuiltinFunction:
    """A host-provided function registered under a name.

    Attributes:
        name: Name the function is registered and called under.
        func: Python callable receiving the evaluated argument values.
        min_args: Minimum number of arguments.
        max_args: Maximum number of arguments, or None for variadic.
        description: One-line summary for listings.
    """

    name: str
    func: Callable[..., Any] = field(repr=False)
    min_args: int = 0
    max_args: int | None = None
    description: str = ""

    def arity_matches(self, count: int) -> bool:
        """Check whether ``count`` arguments satisfy the arity contract."""
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    @property
    def arity(self) -> str:
        """Human-readable arity, e.g. ``"2"``, ``"1..3"`` or ``"1+"``."""
        if self.max_args is None:
            return f"{self.min_args}+"
        if self.max_args == self.min_args:
            return str(self.min_args)
        return f"{self.min_args}..{self.max_args}"

    def __call__(self, *args: Any) -> Any:
        return self.func(*args)

    def __str__(self) -> str:
        return f"<builtin {self.name}>"


def dictionary_key(value: object) -> Hashable:
    """Type-tagged hash key for a Dictionary entry.

    Keys of different template types never collide, so Integer ``1``,
    Float ``1.0`` and Boolean ``true`` are three distinct keys.

    Raises:
        TypeError: If the value cannot be a key (a Dictionary).
    """
    if isinstance(value, (tuple, list)):
        return ("List", tuple(dictionary_key(item) for item in value))
    if isinstance(value, Mapping):
        raise TypeError("Dictionary value cannot be a dictionary key")
    hash(value)
    return (type_name(value), value)


class Dictionary(Mapping[Any, Any]):
    """Immutable, insertion-ordered Dictionary value.

    Entries are keyed by ``dictionary_key``. When a key occurs more than
    once, the last value wins and the first position is kept.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[tuple[Any, Any]] = ()) -> None:
        self._entries: dict[Hashable, tuple[Any, Any]] = {}
        for key, value in entries:
            tagged = dictionary_key(key)
            stored = self._entries.get(tagged)
            self._entries[tagged] = (key if stored is None else stored[0], value)

    def __getitem__(self, key: object) -> Any:
        try:
            return self._entries[dictionary_key(key)][1]
        except TypeError:
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[Any]:
        return (key for key, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dictionary):
            return self._entries == other._entries
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._entries.values())
        return f"Dictionary({{{items}}})"


def lookup_key(mapping: Mapping[Any, Any], key: object) -> Any:
    """Look ``key`` up in a Dictionary or host mapping, matching its type.

    Raises:
        KeyError: If no entry has a key of the same type equal to ``key``.
        TypeError: If ``key`` cannot be a dictionary key.
    """
    tagged = dictionary_key(key)
    if isinstance(mapping, Dictionary):
        return mapping[key]
    for stored, value in mapping.items():
        if stored == key and dictionary_key(stored) == tagged:
            return value
    raise KeyError(key)


Value: TypeAlias = (
    int
    | float
    | str
    | bool
    | tuple[Any, ...]
    | list[Any]
    | Mapping[Any, Any]
    | Closure
    | BuiltinFunction
)


def is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_float(value: object) -> bool:
    return isinstance(value, float)


def is_list(value: object) -> bool:
    return isinstance(value, (tuple, list))


def is_dictionary(value: object) -> bool:
    return isinstance(value, Mapping)


def is_callable(value: object) -> bool:
    return isinstance(value, (Closure, BuiltinFunction))


def is_value(value: object) -> bool:
    """Check whether ``value`` belongs to the template value model.

    Containers are checked recursively.
    """
    if isinstance(value, (bool, int, float, str, Closure, BuiltinFunction)):
        return True
    if isinstance(value, (tuple, list)):
        return all(is_value(item) for item in value)
    if isinstance(value, Mapping):
        return all(is_value(k) and is_value(v) for k, v in value.items())
    return False


def type_name(value: object) -> str:
    """Name of a value's template type, for error messages."""
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Float"
    if isinstance(value, str):
        return "String"
    if is_list(value):
        return "List"
    if is_dictionary(value):
        return "Dictionary"
    if isinstance(value, Closure):
        return "Closure"
    if isinstance(value, BuiltinFunction):
        return "BuiltinFunction"
    return type(value).__name__


def to_text(value: object) -> str:
    """Convert a value to the text it renders as.

    Strings render verbatim; booleans as ``true``/``false``; floats use
    Python's shortest round-trip form (``3.0``, ``300.0``, ``1e+20``).
    Containers render their elements recursively as ``[a, b]`` and
    ``{key: value}``.

    Examples:
        >>> to_text(("a", 1, True))
        '[a, 1, true]'
        >>> to_text({"k": 2.5})
        '{k: 2.5}'
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (tuple, list)):
        return "[" + ", ".join(to_text(item) for item in value) + "]"
    if isinstance(value, Mapping):
        entries = (f"{to_text(k)}: {to_text(v)}" for k, v in value.items())
        return "{" + ", ".join(entries) + "}"
    return str(value)
