# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Commands for viewing ideaflow configuration."""

from cyclopts import App
from rich.table import Table

from ideaflow.config import discover_sources, validate_config

from ._context import CLIContext
from ._shared import ExitCode, exit_with_error, get_console

app = App(name="config", help="Inspect configuration", help_on_error=True)

_MISSING = object()
_SECRET_KEYS = frozenset({"remote.api_key"})


@app.command(name="show")
def _show() -> None:
    """Show the effective configuration as TOML (API key masked)"""
    config = CLIContext.get_current().config
    get_console().print(config.to_toml(), markup=False, highlight=False)


@app.command(name="get")
def _get(key: str, /) -> None:
    """Print one configuration value

    Args:
        key: Dotted key, e.g. remote.timeout.
    """
    value = CLIContext.get_current().config.get(key, _MISSING)
    if value is _MISSING:
        exit_with_error(f"Unknown key: {key}", ExitCode.NOT_FOUND)
    if key in _SECRET_KEYS and value:
        value = "********"
    get_console().print(str(value), markup=False, highlight=False)


@app.command(name="sources")
def _sources() -> None:
    """List configuration sources in precedence order"""
    table = Table()
    table.add_column("source")
    table.add_column("path")
    table.add_column("exists")
    table.add_column("issues")
    for source in discover_sources():
        issues = validate_config(source.values, source=source.name.value) if source.exists else []
        table.add_row(
            source.name.value,
            str(source.path) if source.path else "-",
            "yes" if source.exists else "no",
            "; ".join(f"{i.key}: {i.message}" for i in issues) or "-",
        )
    get_console().print(table)
