"""Abstract syntax tree for Camino templates.

Nodes are immutable, slotted dataclasses built once by the parser. Each
carries the ``Location`` of the source token that introduced it. Passthrough
template text is represented as a ``StringLiteral`` child of the root
``Block``.
"""

from __future__ import annotations

from dataclasses import dataclass

from camino.render.errors import Location

__all__ = [
    "Node",
    "Expression",
    "Block",
    "StringLiteral",
    "LongLiteral",
    "DoubleLiteral",
    "Identifier",
    "MemberAccess",
    "CollectionAccess",
    "FunctionCall",
    "TernaryIf",
    "ListLiteral",
    "DictionaryLiteral",
    "FunctionLiteral",
]


@dataclass(frozen=True, slots=True)
class Node:
    location: Location


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Ordered sequence of expressions.

    The root of a parsed template, whose children are rendered and
    concatenated, and also the body of a function literal, where it wraps
    exactly one expression.
    """

    children: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True, slots=True)
class LongLiteral(Node):
    value: int


@dataclass(frozen=True, slots=True)
class DoubleLiteral(Node):
    value: float


@dataclass(frozen=True, slots=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True, slots=True)
class MemberAccess(Node):
    """``base.member``; located at the ``.`` token."""

    base: Expression
    member: str


@dataclass(frozen=True, slots=True)
class CollectionAccess(Node):
    """``base[index]``; located at the ``[`` token."""

    base: Expression
    index: Expression


@dataclass(frozen=True, slots=True)
class FunctionCall(Node):
    """``function(arguments...)``; located at the ``(`` token."""

    function: Expression
    arguments: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class TernaryIf(Node):
    condition: Expression
    then_value: Expression
    else_value: Expression


@dataclass(frozen=True, slots=True)
class ListLiteral(Node):
    elements: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class DictionaryLiteral(Node):
    entries: tuple[tuple[Expression, Expression], ...]


@dataclass(frozen=True, slots=True)
class FunctionLiteral(Node):
    parameters: tuple[str, ...]
    body: Block


Expression = (
    StringLiteral
    | LongLiteral
    | DoubleLiteral
    | Identifier
    | MemberAccess
    | CollectionAccess
    | FunctionCall
    | TernaryIf
    | ListLiteral
    | DictionaryLiteral
    | FunctionLiteral
)
