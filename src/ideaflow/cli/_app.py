"""The command-line interface for ideaflow."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from ideaflow.config import safe_load_config
from ideaflow.session import UserSession
from ideaflow.utils import create_cli_logger

from ._config import app as config_app
from ._context import CLIContext
from ._refine import app as refine_app

_HELP = "Refine business ideas through a resumable, step-by-step workflow."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the CLI application with its global options.

    Global options are handled by the meta app, which loads configuration,
    creates the CLI logger and publishes a CLIContext before dispatching to
    the requested command.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="ideaflow",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        verbose: Annotated[bool, Parameter(help="Log at debug level")] = False,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        project_dir: Annotated[
            Path | None,
            Parameter(name="--project-dir", help="Directory holding ideaflow.toml"),
        ] = None,
        user: Annotated[
            str | None, Parameter(name="--user", help="User id to act as")
        ] = None,
        step: Annotated[
            str | None,
            Parameter(name="--step", help="Requested step, as in ?step=N"),
        ] = None,
    ) -> None:
        """Launch ideaflow with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            verbose: Lower the log level to debug.
            config: Explicit path to config file.
            project_dir: Directory searched for the project config file.
            user: Id of the signed-in user.
            step: Step requested for this invocation.
        """
        cli_overrides: dict[str, object] | None = None
        if verbose:
            cli_overrides = {"logging": {"level": "debug"}}

        loaded_config, config_error = safe_load_config(
            config_path=config,
            project_dir=project_dir,
            cli_overrides=cli_overrides,
        )

        cli_logger = create_cli_logger(
            level=loaded_config.logging.level.value,
            log_format=loaded_config.logging.format.value,  # type: ignore[arg-type]
            log_file=loaded_config.logging.file,
            command=" ".join(token for token in tokens[:2] if not token.startswith("-")),
        )
        if config_error:
            cli_logger.warning("config_fallback", error=config_error)

        ctx = CLIContext(
            config=loaded_config,
            user=UserSession(user_id=user) if user else None,
            step=step,
            config_path=config,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    app.command(refine_app)
    app.command(config_app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `ideaflow` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
