"""Camino settings.

Settings are merged from, highest priority first:

1. keyword arguments to ``CaminoConfig``
2. ``CAMINO_*`` environment variables (``__`` separates nested keys, e.g.
   ``CAMINO_RENDER__MAX_CALL_DEPTH=50``)
3. the project file, ``./camino.yaml`` or the path given to ``load_config``
4. the user file, ``~/.config/camino/config.yaml``
5. model defaults

Example ``camino.yaml``::

    render:
      max_call_depth: 200
    verbosity: info
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from camino.constants import (
    DEFAULT_MAX_CALL_DEPTH,
    MAX_CALL_DEPTH_LIMIT,
    PROJECT_CONFIG_FILENAME,
)
from camino.exceptions import ConfigError
from camino.logging import get_logger

__all__ = [
    "CaminoConfig",
    "RenderConfig",
    "load_config",
    "get_user_config_path",
]

logger = get_logger(__name__)

Verbosity = Literal["error", "warning", "info", "debug"]

# Set by load_config() for the duration of one CaminoConfig() construction.
_project_config_path: ContextVar[Path | None] = ContextVar(
    "camino_project_config_path", default=None
)


class RenderConfig(BaseModel):
    """Settings for template evaluation.

    Attributes:
        max_call_depth: Maximum nesting of function calls within one render.
            Deeper closure recursion fails with ``CallDepthExceededError``.
    """

    max_call_depth: int = Field(
        default=DEFAULT_MAX_CALL_DEPTH, ge=1, le=MAX_CALL_DEPTH_LIMIT
    )


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    """Read a YAML config file; a missing or empty file yields ``{}``.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.is_file():
        return {}
    try:
        loaded = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if loaded is None:
        logger.warning("config_file_empty", path=str(path))
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, "
            f"got {type(loaded).__name__}",
            value=loaded,
        )
    logger.debug("config_file_loaded", path=str(path), keys=list(loaded))
    return loaded


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source backed by one YAML file."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path) -> None:
        super().__init__(settings_cls)
        self.path = path
        self._data = _read_yaml_mapping(path)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class CaminoConfig(BaseSettings):
    """Root settings object.

    Attributes:
        render: Template evaluation settings.
        verbosity: Default log level for the CLI when neither ``-v`` nor
            ``-q`` is given.
    """

    model_config = SettingsConfigDict(
        env_prefix="CAMINO_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    render: RenderConfig = Field(default_factory=RenderConfig)
    verbosity: Verbosity = "warning"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        project = _project_config_path.get() or Path.cwd() / PROJECT_CONFIG_FILENAME
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Return ``~/.config/camino/config.yaml``."""
    return Path.home() / ".config" / "camino" / "config.yaml"


def load_config(config_path: Path | None = None) -> CaminoConfig:
    """Build the merged settings.

    Args:
        config_path: Project config file; defaults to ``./camino.yaml``.

    Returns:
        The merged CaminoConfig.

    Raises:
        ConfigError: If a file is malformed or a value fails validation.
            ``field`` holds the dotted path of the first invalid setting.
    """
    project = config_path or Path.cwd() / PROJECT_CONFIG_FILENAME
    if not project.exists():
        logger.info("project_config_missing", path=str(project))

    token = _project_config_path.set(project)
    try:
        return CaminoConfig()
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ConfigError(
            f"Invalid configuration: {error['msg']}",
            field=field,
            value=error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
