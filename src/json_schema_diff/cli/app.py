from typing import Optional, get_args

import typer

from json_schema_diff.config import ConfigManager, LogLevel
from json_schema_diff.errors import ConfigError
from json_schema_diff.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        import json_schema_diff

        typer.echo(f"json-schema-diff version: {json_schema_diff.__version__}")
        raise typer.Exit()


app = typer.Typer(name="json-schema-diff", no_args_is_help=True)


@app.callback()
def app_callback(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level for stderr output (overrides config).",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """json-schema-diff - find breaking changes between JSON Schema revisions."""
    try:
        config = ConfigManager().config
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if log_level:
        if log_level.upper() not in get_args(LogLevel):
            raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
        config = config.model_copy(update={"log_level": log_level.upper()})

    setup_logging(config.log_level, config.log_file)
    ctx.obj = config
