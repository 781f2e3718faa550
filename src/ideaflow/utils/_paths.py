"""Filesystem locations used by ideaflow.

All per-user data lives under platformdirs directories so that a draft
started in one process can be picked up by the next.
"""

from pathlib import Path

from platformdirs import user_config_path, user_log_path, user_state_path

APP_NAME = "ideaflow"


def get_config_dir() -> Path:
    """Get the per-user configuration directory."""
    return user_config_path(APP_NAME)


def get_user_config_file() -> Path:
    """Get the path to the per-user configuration file."""
    return get_config_dir() / "config.toml"


def get_project_config_file(cwd: Path | None = None) -> Path:
    """Get the path to the project configuration file.

    Args:
        cwd: Directory to look in. Defaults to the current working directory.

    Returns:
        Path to ``ideaflow.toml`` in the given directory.
    """
    return (cwd if cwd is not None else Path.cwd()) / "ideaflow.toml"


def get_state_dir() -> Path:
    """Get the per-user state directory."""
    return user_state_path(APP_NAME)


def get_state_db() -> Path:
    """Get the path to the durable draft database."""
    return get_state_dir() / "state.db"


def get_log_dir() -> Path:
    """Get the per-user log directory."""
    return user_log_path(APP_NAME)


def get_cli_log_file() -> Path:
    """Get the path to the CLI log file."""
    return get_log_dir() / "cli.log"
