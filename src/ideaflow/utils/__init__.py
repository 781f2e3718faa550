"""Shared utilities: durable state stores, logging, paths and JSON helpers."""

from ._json import dump_json, load_json
from ._logging import LogFormatType, create_cli_logger
from ._paths import (
    APP_NAME,
    get_cli_log_file,
    get_config_dir,
    get_log_dir,
    get_project_config_file,
    get_state_db,
    get_state_dir,
    get_user_config_file,
)
from ._state_store import (
    DEFAULT_SCOPE,
    MockStateStore,
    SQLiteStateStore,
    StateEntry,
    StateStore,
    StateStoreKey,
    StateStoreValue,
    create_state_store,
)

__all__ = [
    "APP_NAME",
    "DEFAULT_SCOPE",
    "LogFormatType",
    "MockStateStore",
    "SQLiteStateStore",
    "StateEntry",
    "StateStore",
    "StateStoreKey",
    "StateStoreValue",
    "create_cli_logger",
    "create_state_store",
    "dump_json",
    "get_cli_log_file",
    "get_config_dir",
    "get_log_dir",
    "get_project_config_file",
    "get_state_db",
    "get_state_dir",
    "get_user_config_file",
    "load_json",
]
