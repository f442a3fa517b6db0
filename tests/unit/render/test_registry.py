"""Unit tests for FunctionRegistry."""

from __future__ import annotations

import pytest

from camino.exceptions import (
    CaminoError,
    DuplicateFunctionError,
    FunctionNotFoundError,
)
from camino.render.registry import FunctionRegistry
from camino.render.values import BuiltinFunction


class TestRegistration:
    """Test registering functions."""

    def test_direct_registration(self) -> None:
        registry = FunctionRegistry()
        result = registry.register("size", len, min_args=1, max_args=1)
        assert result is len
        assert registry.get("size").func is len

    def test_decorator_registration(self) -> None:
        registry = FunctionRegistry()

        @registry.register("twice", min_args=1, max_args=1)
        def twice(value: int) -> int:
            """Double a number."""
            return value * 2

        function = registry.get("twice")
        assert function(4) == 8
        assert function.description == "Double a number."
        assert twice(1) == 2

    def test_explicit_description(self) -> None:
        registry = FunctionRegistry()
        registry.register("f", len, description="custom")
        assert registry.get("f").description == "custom"

    def test_duplicate_name_rejected(self) -> None:
        registry = FunctionRegistry()
        registry.register("f", len)
        with pytest.raises(DuplicateFunctionError) as exc_info:
            registry.register("f", str)
        assert exc_info.value.name == "f"
        assert isinstance(exc_info.value, CaminoError)

    def test_inconsistent_arity_rejected(self) -> None:
        with pytest.raises(ValueError):
            FunctionRegistry().register("f", len, min_args=2, max_args=1)

    def test_add_builtin(self) -> None:
        registry = FunctionRegistry()
        registry.add(BuiltinFunction(name="f", func=len))
        assert "f" in registry


class TestLookup:
    """Test lookup and listing."""

    def test_missing_function(self) -> None:
        with pytest.raises(FunctionNotFoundError) as exc_info:
            FunctionRegistry().get("nope")
        assert "nope" in str(exc_info.value)

    def test_names_are_sorted(self) -> None:
        registry = FunctionRegistry()
        registry.register("b", len)
        registry.register("a", len)
        assert registry.names() == ["a", "b"]
        assert len(registry) == 2
        assert [f.name for f in registry] == ["b", "a"]

    def test_copy_is_independent(self) -> None:
        registry = FunctionRegistry()
        registry.register("a", len)
        copy = registry.copy()
        copy.register("b", len)
        assert "b" not in registry
        assert "a" in copy
