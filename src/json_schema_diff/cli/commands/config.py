"""Config command for json-schema-diff."""

import typer
from rich.console import Console
from rich.table import Table

from json_schema_diff.cli.app import app
from json_schema_diff.config import ConfigManager, DiffConfig

console = Console()

config_app = typer.Typer(help="Inspect json-schema-diff configuration")
app.add_typer(config_app, name="config")


@config_app.command("show")
def show(ctx: typer.Context):
    """Show the effective settings and where the config file lives."""
    config = ctx.obj if isinstance(ctx.obj, DiffConfig) else ConfigManager().config
    config_file = ConfigManager().config_file

    table = Table(title="json-schema-diff settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in config.model_dump().items():
        table.add_row(name, "" if value is None else str(value))

    console.print(table)
    status = "found" if config_file.exists() else "not found"
    console.print(f"\nConfig file: {config_file} ({status})")
