# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing ideaflow configuration values.
"""

from pathlib import Path
from typing import Any, ClassVar, Self, TypeVar, overload

import tomli_w
from pydantic import BaseModel, ConfigDict, PrivateAttr

from ideaflow.config._defaults import DEFAULT_CONFIG
from ideaflow.config._loader import copy_value, deep_merge, parse_env_vars, read_toml_file
from ideaflow.config._models._common import ConfigSource, ConfigSourceName
from ideaflow.config._models._features import FeaturesConfig
from ideaflow.config._models._logging import LoggingConfig
from ideaflow.config._models._remote import RemoteConfig
from ideaflow.config._models._storage import StorageConfig
from ideaflow.config._models._workflow import WorkflowConfig

T = TypeVar("T")


class Config(BaseModel):
    """Configuration container with typed access.

    Immutable. Use the factory methods rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _logging: LoggingConfig = PrivateAttr(default_factory=LoggingConfig)
    _storage: StorageConfig = PrivateAttr(default_factory=StorageConfig)
    _workflow: WorkflowConfig = PrivateAttr(default_factory=WorkflowConfig)
    _remote: RemoteConfig = PrivateAttr(default_factory=RemoteConfig)
    _features: FeaturesConfig = PrivateAttr(default_factory=FeaturesConfig)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
    ) -> None:
        """Initialize configuration container from an already-validated dict.

        This constructor is intended for internal use. Use from_dict(),
        from_file() or load() to create Config instances.

        Args:
            _data: The complete merged configuration dictionary.
            _sources: Sources that contributed to this configuration.
        """
        super().__init__()
        data = _data if _data is not None else copy_value(DEFAULT_CONFIG)
        self._data = data
        self._sources = _sources
        self._logging = LoggingConfig.model_validate(data.get("logging", {}))
        self._storage = StorageConfig.model_validate(data.get("storage", {}))
        self._workflow = WorkflowConfig.model_validate(data.get("workflow", {}))
        self._remote = RemoteConfig.model_validate(data.get("remote", {}))
        self._features = FeaturesConfig.model_validate(data.get("features", {}))

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        validate: bool = True,
    ) -> Self:
        """Create configuration from a dictionary merged over the defaults.

        Raises:
            ConfigValidationError: If validation fails (when validate=True).
        """
        from ideaflow.config._validation import (  # noqa: PLC0415
            raise_if_validation_errors,
            validate_config,
        )

        merged = deep_merge(DEFAULT_CONFIG, data)
        if validate:
            raise_if_validation_errors(validate_config(merged))
        return cls(_data=merged)

    @classmethod
    def from_file(
        cls,
        path: Path,
        *,
        validate: bool = True,
    ) -> Self:
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.
            validate: Whether to validate the loaded config.

        Returns:
            Configuration object from the defaults and this file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        from ideaflow.config._validation import (  # noqa: PLC0415
            raise_if_validation_errors,
            validate_config,
        )

        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=path,
            exists=True,
            values=data,
        )
        merged = deep_merge(DEFAULT_CONFIG, data)
        if validate:
            raise_if_validation_errors(validate_config(merged), source=str(path))
        return cls(_data=merged, _sources=(source,))

    @classmethod
    def load(
        cls,
        *,
        project_dir: Path | None = None,
        include_env: bool = True,
        include_cli: bool = False,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load merged configuration from all sources.

        Merges in precedence order: defaults, user file, project file,
        environment, CLI overrides.

        Args:
            project_dir: Directory holding ``ideaflow.toml``. Defaults to the
                current working directory.
            include_env: Include environment variables as a source.
            include_cli: Include CLI overrides.
            cli_overrides: Dict of CLI argument overrides.

        Raises:
            ConfigLoadError: If config files cannot be loaded.
            ConfigValidationError: If merged config fails validation.
        """
        from ideaflow.config._discovery import discover_sources  # noqa: PLC0415
        from ideaflow.config._validation import (  # noqa: PLC0415
            raise_if_validation_errors,
            validate_config,
        )

        sources = discover_sources(
            project_dir=project_dir,
            include_env=include_env,
            include_cli=include_cli,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded_sources: list[ConfigSource] = []

        # Sources are discovered highest-to-lowest
        for source in reversed(sources):
            values: dict[str, Any] = {}

            if source.name in (ConfigSourceName.DEFAULT, ConfigSourceName.CLI):
                values = source.values
            elif source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path and source.exists:
                values = read_toml_file(source.path)

            loaded_sources.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )
            if values:
                merged = deep_merge(merged, values)

        raise_if_validation_errors(validate_config(merged))

        return cls(_data=merged, _sources=tuple(reversed(loaded_sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        """Return the logging configuration section."""
        return self._logging

    @property
    def storage(self) -> StorageConfig:
        """Return the storage configuration section."""
        return self._storage

    @property
    def workflow(self) -> WorkflowConfig:
        """Return the workflow configuration section."""
        return self._workflow

    @property
    def remote(self) -> RemoteConfig:
        """Return the remote configuration section."""
        return self._remote

    @property
    def features(self) -> FeaturesConfig:
        """Return the features configuration section."""
        return self._features

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config.get("workflow.route")
            '/idea-hub/refinement'
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the merged configuration."""
        return copy_value(self._data)

    def to_toml(self) -> str:
        """Render the merged configuration as TOML.

        Secrets (``remote.api_key``) are masked.
        """
        data = self.to_dict()
        if data.get("remote", {}).get("api_key"):
            data["remote"]["api_key"] = "********"
        return tomli_w.dumps(data)
