from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from camino.render import Environment, FunctionRegistry, default_registry


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for test environment.

    Logging goes to stderr at WARNING level so log output never mixes with
    rendered template output captured from stdout.
    """
    from camino.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all CAMINO_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("CAMINO_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> FunctionRegistry:
    """Fresh copy of the standard built-in function registry."""
    return default_registry()


@pytest.fixture
def empty_env() -> Environment:
    """Root environment with no bindings."""
    return Environment()
