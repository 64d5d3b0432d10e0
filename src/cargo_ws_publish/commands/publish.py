"""Publish command: dry-run every workspace crate and publish on confirmation."""

from pathlib import Path

import typer

from ..config import get_logger, get_settings
from ..exceptions import PackageCommandError, PublishToolError
from ..publisher import PackageOutcome, PublishOptions, WorkspacePublisher
from ..utils.common import console
from ..workspace import discover_packages, select_packages

logger = get_logger("commands.publish")


def _fail(error: PublishToolError) -> None:
    """Report a fatal error and exit non-zero."""
    if isinstance(error, PackageCommandError):
        console.print(f"\n[red]✗ {error.action} failed: {error.package}[/red]")
        console.print("   [red]Error output:[/red]")
        if error.output:
            console.print(error.output, markup=False, highlight=False)
        logger.error("Package step failed", package=error.package, action=error.action)
    else:
        console.print(f"[red]✗ {error}[/red]")
        output = getattr(error, "output", "")
        if output:
            console.print(output, markup=False, highlight=False)
        logger.error("Publish run aborted", error=str(error))
    raise typer.Exit(1)


def publish_workspace(
    root: Path = typer.Argument(
        Path("."),
        help="Workspace root (directory containing the workspace Cargo.toml)",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    packages: list[str] | None = typer.Option(
        None, "--package", "-p", help="Only process this crate (repeatable)"
    ),
    exclude: list[str] | None = typer.Option(
        None, "--exclude", "-x", help="Skip this crate (repeatable)"
    ),
    registry: str | None = typer.Option(
        None, "--registry", help="Target registry (default: crates-io)"
    ),
    allow_dirty: bool = typer.Option(
        False, "--allow-dirty", help="Pass --allow-dirty to cargo publish"
    ),
    no_verify: bool = typer.Option(False, "--no-verify", help="Pass --no-verify to cargo publish"),
    validate_only: bool = typer.Option(
        False, "--validate-only", help="Dry-run every crate and never prompt to publish"
    ),
    sync_wait: float | None = typer.Option(
        None, "--sync-wait", min=0, help="Seconds to wait after each publish for the index to sync"
    ),
):
    """Dry-run each workspace crate and publish it after confirmation."""
    settings = get_settings()
    options = PublishOptions(
        registry=registry or settings.registry,
        allow_dirty=allow_dirty,
        no_verify=no_verify,
        validate_only=validate_only,
        sync_wait=settings.sync_wait if sync_wait is None else sync_wait,
    )

    mode = "dry-run only" if validate_only else "dry-run/publish"
    console.print(f"[bold]📦 Cargo workspace {mode} (stops at the first failure)[/bold]\n")

    console.print("[bold]Reading workspace crates...[/bold]")
    try:
        crates = select_packages(discover_packages(root), include=packages, exclude=exclude)
    except PublishToolError as e:
        _fail(e)

    if not crates:
        console.print("[yellow]⚠ No local crates to process[/yellow]")
        return

    console.print("Found crates:")
    for crate in crates:
        console.print(f"  {crate.manifest_path}")

    publisher = WorkspacePublisher(options=options, console=console)
    try:
        report = publisher.run(crates)
    except PublishToolError as e:
        _fail(e)

    console.print("\n" + "=" * 50)
    console.print("[green bold]✓ All crates processed[/green bold]")
    console.print("=" * 50)
    for outcome in PackageOutcome:
        count = report.count(outcome)
        if count:
            console.print(f"  {outcome.value}: {count}")
