"""Diff command for json-schema-diff.

Compares an old and a new schema file and prints every change, one JSON object
per line by default:

  {"path":"","change":{"TypeRemove":{"removed":"string"}},"is_breaking":true}

Exit codes:
  0 - diff completed (breaking changes or not)
  1 - a file could not be read or parsed, or a schema is invalid
  2 - bad command-line arguments
  3 - breaking changes found and --fail-on-breaking was given
"""

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from json_schema_diff.cli.app import app
from json_schema_diff.config import DiffConfig
from json_schema_diff.errors import SchemaDiffError
from json_schema_diff.schema import Change, diff_schemas
from json_schema_diff.schemas import ChangeRecord, DiffSummary

console = Console()

EXIT_BREAKING = 3


def _load_json(path: Path) -> Any:
    """Read and decode a JSON file, exiting with code 1 on failure."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.error(f"Could not read {path}: {e}")
        typer.echo(f"Error: could not read {path}: {e}", err=True)
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        typer.echo(f"Error: invalid JSON in {path}: {e}", err=True)
        raise typer.Exit(1)


def _print_json_lines(changes: list[Change]) -> None:
    for change in changes:
        typer.echo(ChangeRecord.from_change(change).model_dump_json())


def _print_table(changes: list[Change], old: Path, new: Path) -> None:
    summary = DiffSummary.from_changes(changes)
    if not changes:
        console.print("[green]No changes.[/green]")
        return

    table = Table(title=f"Schema diff: {old.name} -> {new.name}")
    table.add_column("Path", style="cyan")
    table.add_column("Change")
    table.add_column("Details")
    table.add_column("Breaking", justify="center")

    for change in changes:
        record = ChangeRecord.from_change(change)
        details = json.dumps(record.change[record.tag], sort_keys=True)
        breaking = "[red]yes[/red]" if change.is_breaking else "[green]no[/green]"
        table.add_row(record.path or "/", record.tag, details, breaking)

    console.print(table)
    console.print(
        f"\nSummary: {summary.total} changes, "
        f"{summary.breaking} breaking, {summary.non_breaking} non-breaking"
    )


@app.command()
def diff(
    ctx: typer.Context,
    old: Annotated[Path, typer.Argument(help="The old schema file")],
    new: Annotated[Path, typer.Argument(help="The new schema file")],
    output_format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: json (one change per line) or table"),
    ] = None,
    fail_on_breaking: bool = typer.Option(
        False, "--fail-on-breaking", help="Exit with code 3 if any change is breaking"
    ),
    format_breaking: Annotated[
        Optional[bool],
        typer.Option(
            "--format-breaking/--format-advisory",
            help="Treat format changes as breaking (overrides config)",
        ),
    ] = None,
):
    """Compare OLD and NEW schema files and print the changes.

    A successful diff exits with 0 even when breaking changes are found;
    use --fail-on-breaking to gate CI on them.
    """
    config: DiffConfig = ctx.obj if isinstance(ctx.obj, DiffConfig) else DiffConfig()

    output_format = (output_format or config.output_format).lower()
    if output_format not in ("json", "table"):
        raise typer.BadParameter(f"Unknown format: {output_format}", param_hint="--format")

    if format_breaking is not None:
        config = config.model_copy(update={"format_changes_breaking": format_breaking})

    lhs = _load_json(old)
    rhs = _load_json(new)

    try:
        changes = diff_schemas(lhs, rhs, policy=config.policy)
    except SchemaDiffError as e:
        logger.error(f"Error during schema diff: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    logger.info(f"Compared {old} -> {new}: {len(changes)} changes")

    if output_format == "table":
        _print_table(changes, old, new)
    else:
        _print_json_lines(changes)

    if fail_on_breaking and any(change.is_breaking for change in changes):
        raise typer.Exit(EXIT_BREAKING)
