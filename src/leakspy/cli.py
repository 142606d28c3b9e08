"""CLI entry point using Typer."""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from leakspy.config import Config
from leakspy.report import emit_report
from leakspy.snapshot import Snapshot

app = typer.Typer(
    name="leakspy",
    help="Inspect subscription leak snapshots",
    no_args_is_help=True,
)


def main() -> None:
    """Entry point for the CLI."""
    app()


@app.command()
def show(
    snapshot_path: Annotated[Path, typer.Argument(help="Snapshot JSON file to render")],
) -> None:
    """Render the leak report stored in a snapshot file.

    Exits with status 1 when the snapshot holds any leak.
    """
    if not snapshot_path.exists():
        typer.echo(f"Snapshot not found: {snapshot_path}", err=True)
        raise typer.Exit(1)

    try:
        snapshot = Snapshot.load(snapshot_path)
    except (OSError, UnicodeDecodeError, ValidationError) as err:
        typer.echo(f"Invalid snapshot file: {snapshot_path}", err=True)
        raise typer.Exit(1) from err

    if snapshot.is_empty:
        typer.echo("No open subscriptions")
        return

    emit_report(snapshot, Console())
    raise typer.Exit(1)


@app.command("config")
def show_config() -> None:
    """Show the resolved configuration."""
    config = Config.load()
    typer.echo(f"stack_limit: {config.stack_limit}")
    typer.echo(f"capture_stacks: {str(config.capture_stacks).lower()}")
    typer.echo(f"snapshot_dir: {config.snapshot_dir or '-'}")
    typer.echo(f"target: {config.target or 'leakspy.stream:Observable'}")
