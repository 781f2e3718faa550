"""Configuration source discovery."""

from pathlib import Path
from typing import Any

from ideaflow.utils import get_project_config_file, get_user_config_file

from ._defaults import DEFAULT_CONFIG
from ._models._common import ConfigSource, ConfigSourceName


def _file_exists(path: Path) -> bool:
    """Check if a file exists, treating permission errors as absence."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    project_dir: Path | None = None,
    *,
    include_env: bool = True,
    include_cli: bool = False,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources.

    File-based sources are included even when missing, with exists=False.

    Args:
        project_dir: Directory holding ``ideaflow.toml``. Defaults to the
            current working directory.
        include_env: Include environment variables as a source.
        include_cli: Include CLI overrides as a source.
        cli_overrides: Dictionary of CLI argument overrides.

    Returns:
        List of ConfigSource objects in precedence order (highest first).
    """
    sources: list[ConfigSource] = []

    if include_cli:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides or {},
            )
        )

    if include_env:
        # Values are parsed during loading
        sources.append(
            ConfigSource(name=ConfigSourceName.ENV, path=None, exists=True, values={})
        )

    project_path = get_project_config_file(project_dir)
    sources.append(
        ConfigSource(
            name=ConfigSourceName.PROJECT,
            path=project_path,
            exists=_file_exists(project_path),
            values={},
        )
    )

    user_path = get_user_config_file()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
