"""ideaflow configuration.

Loading, validation, and typed access to configuration values.

Example:
    >>> from ideaflow.config import Config
    >>> config = Config.load()
    >>> config.workflow.autosave_interval
    30.0
"""

from ideaflow.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import discover_sources
from ._load import safe_load_config
from ._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    FeaturesConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    RemoteConfig,
    StorageBackend,
    StorageConfig,
    WorkflowConfig,
)
from ._validation import ValidationIssue, raise_if_validation_errors, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "FeaturesConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RemoteConfig",
    "StorageBackend",
    "StorageConfig",
    "ValidationIssue",
    "WorkflowConfig",
    "deep_merge",
    "discover_sources",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]
