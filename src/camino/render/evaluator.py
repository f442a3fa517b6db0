"""Tree-walking evaluator for Camino templates.

This module provides the ``Evaluator`` class, which turns a parsed ``Block``
plus an ``Environment`` into rendered text, or any sub-expression into a
runtime value.

Evaluation rules:
- Literals evaluate to their value.
- Identifiers resolve through the environment chain, then the function
  registry, then the ``true``/``false`` constants.
- ``a.b`` requires a Dictionary; ``a[i]`` indexes a List by Integer or a
  Dictionary by key.
- Calls evaluate the callee, then the arguments left to right. Closures run
  their body in a child of the frame they captured; built-ins are invoked
  with the argument values and any failure is wrapped in
  ``FunctionCallError``.
- ``if(c, a, b)`` requires a Boolean condition and evaluates exactly one
  branch.
- A template ``Block`` renders each child to text and concatenates them.

Each top-level call runs in its own evaluation state, so one ``Evaluator``
may be shared between threads.
"""

from __future__ import annotations

from collections.abc import Mapping

from camino.constants import DEFAULT_MAX_CALL_DEPTH
from camino.render.environment import Environment
from camino.render.errors import (
    ArityMismatchError,
    CallDepthExceededError,
    FunctionCallError,
    IndexOutOfRangeError,
    Location,
    MemberNotFoundError,
    TypeMismatchError,
    UnresolvedReferenceError,
)
from camino.render.nodes import (
    Block,
    CollectionAccess,
    DictionaryLiteral,
    DoubleLiteral,
    Expression,
    FunctionCall,
    FunctionLiteral,
    Identifier,
    ListLiteral,
    LongLiteral,
    MemberAccess,
    StringLiteral,
    TernaryIf,
)
from camino.render.registry import FunctionRegistry
from camino.render.values import (
    BuiltinFunction,
    Closure,
    Dictionary,
    Value,
    dictionary_key,
    is_integer,
    is_value,
    lookup_key,
    to_text,
    type_name,
)

__all__ = ["Evaluator", "BOOLEAN_CONSTANTS", "render", "evaluate"]

#: Names resolved when no frame or registry entry binds them
BOOLEAN_CONSTANTS: Mapping[str, bool] = {"true": True, "false": False}


class _Evaluation:
    """Mutable state for one top-level evaluate/render call."""

    __slots__ = ("_registry", "_max_call_depth", "_depth")

    def __init__(self, registry: FunctionRegistry, max_call_depth: int) -> None:
        self._registry = registry
        self._max_call_depth = max_call_depth
        self._depth = 0

    def render(self, block: Block, environment: Environment) -> str:
        return "".join(
            to_text(self.evaluate(child, environment)) for child in block.children
        )

    def evaluate(self, node: Block | Expression, environment: Environment) -> Value:
        match node:
            case Block(children=(child,)):
                return self.evaluate(child, environment)
            case Block():
                return self.render(node, environment)
            case StringLiteral() | LongLiteral() | DoubleLiteral():
                return node.value
            case Identifier():
                return self._identifier(node, environment)
            case MemberAccess():
                return self._member_access(node, environment)
            case CollectionAccess():
                return self._collection_access(node, environment)
            case FunctionCall():
                return self._function_call(node, environment)
            case TernaryIf():
                return self._ternary_if(node, environment)
            case ListLiteral():
                return tuple(self.evaluate(e, environment) for e in node.elements)
            case DictionaryLiteral():
                return self._dictionary_literal(node, environment)
            case FunctionLiteral():
                return Closure(
                    parameters=node.parameters,
                    body=node.body,
                    environment=environment,
                )
        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _identifier(self, node: Identifier, environment: Environment) -> Value:
        try:
            return environment.lookup(node.name)
        except KeyError:
            pass
        if node.name in self._registry:
            return self._registry.get(node.name)
        if node.name in BOOLEAN_CONSTANTS:
            return BOOLEAN_CONSTANTS[node.name]
        raise UnresolvedReferenceError(node.name, node.location)

    def _member_access(self, node: MemberAccess, environment: Environment) -> Value:
        base = self.evaluate(node.base, environment)
        if not isinstance(base, Mapping):
            raise TypeMismatchError(
                f"Cannot access member '{node.member}' of {type_name(base)} value",
                node.location,
            )
        if node.member not in base:
            raise MemberNotFoundError(node.member, node.location)
        return base[node.member]

    def _collection_access(
        self, node: CollectionAccess, environment: Environment
    ) -> Value:
        base = self.evaluate(node.base, environment)
        index = self.evaluate(node.index, environment)

        if isinstance(base, (tuple, list)):
            if not is_integer(index):
                raise TypeMismatchError(
                    f"List index must be Integer, got {type_name(index)}",
                    node.location,
                )
            if index < 0 or index >= len(base):
                raise IndexOutOfRangeError(index, len(base), node.location)
            return base[index]

        if isinstance(base, Mapping):
            try:
                return lookup_key(base, index)
            except TypeError:
                raise TypeMismatchError(
                    f"{type_name(index)} value cannot be a dictionary key",
                    node.location,
                ) from None
            except KeyError:
                raise MemberNotFoundError(index, node.location) from None

        raise TypeMismatchError(
            f"Cannot index {type_name(base)} value", node.location
        )

    def _function_call(self, node: FunctionCall, environment: Environment) -> Value:
        function = self.evaluate(node.function, environment)
        arguments = tuple(self.evaluate(arg, environment) for arg in node.arguments)

        if isinstance(function, Closure):
            if len(arguments) != len(function.parameters):
                raise ArityMismatchError(
                    len(function.parameters), len(arguments), node.location
                )
            scope = function.environment.child(
                dict(zip(function.parameters, arguments, strict=True))
            )
            self._enter(node.location)
            try:
                return self.evaluate(function.body, scope)
            finally:
                self._depth -= 1

        if isinstance(function, BuiltinFunction):
            return self._call_builtin(function, arguments, node.location)

        raise TypeMismatchError(
            f"{type_name(function)} value is not callable", node.location
        )

    def _call_builtin(
        self,
        function: BuiltinFunction,
        arguments: tuple[Value, ...],
        location: Location,
    ) -> Value:
        if not function.arity_matches(len(arguments)):
            raise FunctionCallError(
                function.name,
                f"expects {function.arity} argument(s), got {len(arguments)}",
                location,
            )
        self._enter(location)
        try:
            result = function(*arguments)
        except RecursionError:
            raise
        except Exception as e:
            raise FunctionCallError(
                function.name, str(e) or type(e).__name__, location, cause=e
            ) from e
        finally:
            self._depth -= 1
        if not is_value(result):
            raise FunctionCallError(
                function.name,
                f"returned unsupported value of type {type(result).__name__}",
                location,
            )
        return result

    def _enter(self, location: Location) -> None:
        if self._depth >= self._max_call_depth:
            raise CallDepthExceededError(self._max_call_depth, location)
        self._depth += 1

    def _ternary_if(self, node: TernaryIf, environment: Environment) -> Value:
        condition = self.evaluate(node.condition, environment)
        if not isinstance(condition, bool):
            raise TypeMismatchError(
                f"Condition must be Boolean, got {type_name(condition)}",
                node.location,
            )
        branch = node.then_value if condition else node.else_value
        return self.evaluate(branch, environment)

    def _dictionary_literal(
        self, node: DictionaryLiteral, environment: Environment
    ) -> Value:
        entries: list[tuple[Value, Value]] = []
        for key_node, value_node in node.entries:
            key = self.evaluate(key_node, environment)
            try:
                dictionary_key(key)
            except TypeError:
                raise TypeMismatchError(
                    f"{type_name(key)} value cannot be a dictionary key",
                    key_node.location,
                ) from None
            entries.append((key, self.evaluate(value_node, environment)))
        return Dictionary(entries)


class Evaluator:
    """Evaluates parsed templates against an environment.

    Attributes:
        registry: Built-in functions available to templates.
        max_call_depth: Maximum nesting of function calls per evaluation.

    Example:
        ```python
        evaluator = Evaluator(default_registry())
        block = parse("Hello <%= upper(name) %>!")
        env = Environment.from_properties({"name": "world"})
        evaluator.render(block, env)  # "Hello WORLD!"
        ```
    """

    def __init__(
        self,
        registry: FunctionRegistry | None = None,
        *,
        max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
    ) -> None:
        if max_call_depth < 1:
            raise ValueError("max_call_depth must be at least 1")
        self.registry = registry if registry is not None else FunctionRegistry()
        self.max_call_depth = max_call_depth

    def render(self, block: Block, environment: Environment) -> str:
        """Render a template block to text.

        Args:
            block: Root block returned by ``parse``.
            environment: Environment supplying variable bindings.

        Returns:
            The concatenated text of every child of the block.

        Raises:
            RenderError: If any child fails to evaluate.
        """
        state = _Evaluation(self.registry, self.max_call_depth)
        try:
            return state.render(block, environment)
        except RecursionError:
            raise CallDepthExceededError(
                self.max_call_depth, block.location
            ) from None

    def evaluate(self, node: Block | Expression, environment: Environment) -> Value:
        """Evaluate a node to a runtime value.

        A block with exactly one child evaluates to that child's value
        unconverted; any other block evaluates to its rendered text.

        Raises:
            RenderError: If evaluation fails.
        """
        state = _Evaluation(self.registry, self.max_call_depth)
        try:
            return state.evaluate(node, environment)
        except RecursionError:
            raise CallDepthExceededError(
                self.max_call_depth, node.location
            ) from None


def render(
    block: Block,
    environment: Environment,
    registry: FunctionRegistry | None = None,
    *,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> str:
    """Render ``block`` against ``environment``; see ``Evaluator.render``."""
    return Evaluator(registry, max_call_depth=max_call_depth).render(block, environment)


def evaluate(
    node: Block | Expression,
    environment: Environment,
    registry: FunctionRegistry | None = None,
    *,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> Value:
    """Evaluate ``node`` against ``environment``; see ``Evaluator.evaluate``."""
    return Evaluator(registry, max_call_depth=max_call_depth).evaluate(
        node, environment
    )
