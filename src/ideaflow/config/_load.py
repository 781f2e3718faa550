import os
import sys
from pathlib import Path

from ideaflow.exceptions import ConfigError

from ._loader import deep_merge
from ._models import Config


def safe_load_config(
    *,
    config_path: Path | None = None,
    project_dir: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Behaviour on failure depends on IDEAFLOW_STRICT_CONFIG:
    - If unset or "0": warn to stderr and return the default config
    - If "1": fail fast with sys.exit(1)

    When config_path is provided, the file must exist and CLI overrides are
    layered on top of it.

    Args:
        config_path: Explicit path to config file (--config flag).
        project_dir: Directory holding the project config file.
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
    """
    strict_mode = os.environ.get("IDEAFLOW_STRICT_CONFIG", "0") == "1"

    try:
        if config_path is not None:
            if not config_path.exists():
                print(f"Error: Config file not found: {config_path}", file=sys.stderr)  # noqa: T201
                sys.exit(1)
            config = Config.from_file(config_path)
            if cli_overrides:
                config = Config.from_dict(deep_merge(config.to_dict(), cli_overrides))
            return config, None

        config = Config.load(
            project_dir=project_dir,
            include_env=True,
            include_cli=cli_overrides is not None,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, OSError) as e:
        error_msg = str(e)
        if strict_mode:
            print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
        print(f"Warning: Failed to load config: {error_msg}", file=sys.stderr)  # noqa: T201
        return Config.from_dict({}), error_msg
    else:
        return config, None
