"""Configuration models."""

from ._common import ConfigSource, ConfigSourceName, LogFormat, LogLevel, StorageBackend
from ._config import Config
from ._features import FeaturesConfig
from ._logging import LoggingConfig
from ._remote import RemoteConfig
from ._storage import StorageConfig
from ._workflow import WorkflowConfig

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "FeaturesConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "RemoteConfig",
    "StorageBackend",
    "StorageConfig",
    "WorkflowConfig",
]
