"""List command for showing the workspace crates."""

from pathlib import Path

import typer
from rich.table import Table

from ..config import get_settings
from ..exceptions import PublishToolError
from ..utils.common import console
from ..workspace import discover_packages


def list_packages(
    root: Path = typer.Argument(
        Path("."),
        help="Workspace root (directory containing the workspace Cargo.toml)",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    registry: str | None = typer.Option(
        None, "--registry", help="Registry to check publishability against"
    ),
):
    """List the local crates of a workspace."""
    registry = registry or get_settings().registry

    try:
        packages = discover_packages(root)
    except PublishToolError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Workspace Crates")
    table.add_column("Crate", style="cyan", no_wrap=True)
    table.add_column("Version", style="green")
    table.add_column("Path")
    table.add_column("Status", style="yellow")

    for package in packages:
        if package.is_publishable(registry):
            status = "✓ Publishable"
        elif package.publish == []:
            status = "⊘ publish = false"
        else:
            status = f"⊘ not allowed for {registry}"
        try:
            path = package.directory.relative_to(root)
        except ValueError:
            path = package.directory
        table.add_row(package.name, package.version, str(path), status)

    console.print(table)
    console.print(f"\nTotal crates: {len(packages)}")
    console.print("\nUse [cyan]cargo-ws-publish publish[/cyan] to dry-run and publish them")
