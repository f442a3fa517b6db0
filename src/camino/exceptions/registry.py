from __future__ import annotations

from camino.exceptions.base import CaminoError


class FunctionRegistryError(CaminoError):
    """Base exception for function registry errors."""


class FunctionNotFoundError(FunctionRegistryError):
    """Exception raised when a function name is not registered.

    Attributes:
        name: The name that was looked up.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function '{name}' is not registered")


class DuplicateFunctionError(FunctionRegistryError):
    """Exception raised when registering a name that is already taken.

    Attributes:
        name: The name that was registered twice.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Function '{name}' is already registered")
