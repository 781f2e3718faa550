from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from rich.console import Console

from ideaflow.cli import CLIContext, create_app


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write an isolated config: SQLite draft store and log file under tmp_path."""
    path = tmp_path / "ideaflow.toml"
    path.write_text(
        f"""[logging]
level = "debug"
file = "{(tmp_path / "cli.log").as_posix()}"

[storage]
path = "{(tmp_path / "state.db").as_posix()}"
"""
    )
    return path


@pytest.fixture
def ideaflow_cli(
    console: Console, config_file: Path
) -> Generator[Callable[..., int]]:
    """Run the CLI with the isolated config and return the exit code.

    Global options come first, as on the command line.
    """
    app = create_app(console=console, error_console=console, exit_on_error=False)

    def _run(*args: str, user: str | None = "user-1") -> int:
        argv = ["--config", str(config_file)]
        if user is not None:
            argv += ["--user", user]
        try:
            app.meta([*argv, *args])
        except SystemExit as e:
            if e.code is None:
                return 0
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    yield _run

    CLIContext.reset()
