"""FunctionRegistry for built-in template functions.

The registry maps function names to ``BuiltinFunction`` values. The evaluator
consults it when an identifier is not bound in the environment, so a call
such as ``<%= upper(name) %>`` resolves ``upper`` here.

Functions are registered explicitly or with the decorator form::

    registry = FunctionRegistry()

    @registry.register("twice", min_args=1, max_args=1)
    def twice(value):
        return value * 2
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Any

from camino.exceptions import DuplicateFunctionError, FunctionNotFoundError
from camino.render.values import BuiltinFunction

__all__ = ["FunctionRegistry"]

F = Callable[..., Any]


def _summary(func: F) -> str:
    doc = func.__doc__ or ""
    return doc.strip().splitlines()[0] if doc.strip() else ""


class FunctionRegistry:
    """Name to built-in function table.

    Attributes:
        _functions: Internal dictionary mapping names to BuiltinFunction values.
    """

    def __init__(self, functions: Iterable[BuiltinFunction] = ()) -> None:
        self._functions: dict[str, BuiltinFunction] = {}
        for function in functions:
            self.add(function)

    def register(
        self,
        name: str,
        func: F | None = None,
        *,
        min_args: int = 0,
        max_args: int | None = None,
        description: str | None = None,
    ) -> F | Callable[[F], F]:
        """Register a Python callable as a built-in function.

        Can be used as a decorator or called directly.

        Args:
            name: Name templates call the function by.
            func: Callable to register (None when used as decorator).
            min_args: Minimum argument count.
            max_args: Maximum argument count, None for variadic.
            description: One-line summary; defaults to the docstring's first line.

        Returns:
            The registered callable when called directly, or a decorator.

        Raises:
            DuplicateFunctionError: If the name is already registered.
        """
        if max_args is not None and max_args < min_args:
            raise ValueError(f"max_args ({max_args}) < min_args ({min_args})")

        def decorator(target: F) -> F:
            self.add(
                BuiltinFunction(
                    name=name,
                    func=target,
                    min_args=min_args,
                    max_args=max_args,
                    description=(
                        description if description is not None else _summary(target)
                    ),
                )
            )
            return target

        if func is None:
            return decorator
        return decorator(func)

    def add(self, function: BuiltinFunction) -> None:
        """Add an already-built BuiltinFunction.

        Raises:
            DuplicateFunctionError: If the name is already registered.
        """
        if function.name in self._functions:
            raise DuplicateFunctionError(function.name)
        self._functions[function.name] = function

    def get(self, name: str) -> BuiltinFunction:
        """Look up a function by name.

        Raises:
            FunctionNotFoundError: If no function is registered under the name.
        """
        if name not in self._functions:
            raise FunctionNotFoundError(name)
        return self._functions[name]

    def names(self) -> list[str]:
        """Sorted list of registered function names."""
        return sorted(self._functions)

    def copy(self) -> FunctionRegistry:
        """Shallow copy, for extending a shared registry without altering it."""
        return FunctionRegistry(self._functions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[BuiltinFunction]:
        return iter(self._functions.values())

    def __len__(self) -> int:
        return len(self._functions)
