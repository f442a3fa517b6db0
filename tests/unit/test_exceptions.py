"""Tests for the Camino exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from camino.exceptions import (
    CaminoError,
    ConfigError,
    DuplicateFunctionError,
    FunctionNotFoundError,
    FunctionRegistryError,
    PropertyError,
)
from camino.render.errors import TemplateError


class TestCaminoError:
    """Tests for the base exception."""

    def test_message(self) -> None:
        error = CaminoError("something failed")
        assert error.message == "something failed"
        assert str(error) == "something failed"

    @pytest.mark.parametrize(
        "error_type",
        [ConfigError, PropertyError, FunctionRegistryError, TemplateError],
    )
    def test_subclasses(self, error_type: type[Exception]) -> None:
        assert issubclass(error_type, CaminoError)


class TestConfigError:
    """Tests for ConfigError."""

    def test_field_and_value(self) -> None:
        error = ConfigError("bad", field="render.max_call_depth", value=-1)
        assert error.message == "bad"
        assert error.field == "render.max_call_depth"
        assert error.value == -1

    def test_defaults(self) -> None:
        error = ConfigError("bad")
        assert error.field is None
        assert error.value is None


class TestPropertyError:
    """Tests for PropertyError."""

    def test_source_appended(self) -> None:
        error = PropertyError("Invalid YAML", Path("props.yaml"))
        assert error.message == "Invalid YAML (props.yaml)"
        assert error.source == Path("props.yaml")

    def test_without_source(self) -> None:
        assert PropertyError("bad").message == "bad"


class TestRegistryErrors:
    """Tests for function registry errors."""

    def test_not_found(self) -> None:
        error = FunctionNotFoundError("nope")
        assert error.name == "nope"
        assert isinstance(error, FunctionRegistryError)
        assert error.message == "Function 'nope' is not registered"

    def test_duplicate(self) -> None:
        error = DuplicateFunctionError("upper")
        assert error.message == "Function 'upper' is already registered"
