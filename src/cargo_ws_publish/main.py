#!/usr/bin/env python3
"""Main entry point for the cargo-ws-publish CLI."""

import sys

import typer

from cargo_ws_publish import __version__
from cargo_ws_publish.commands import list_cmd, publish
from cargo_ws_publish.utils.common import console

app = typer.Typer(
    name="cargo-ws-publish",
    help="📦 Dry-run and publish the crates of a Cargo workspace",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"[bold cyan]cargo-ws-publish[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Validate and publish every local crate of a Cargo workspace."""
    pass


app.command(name="publish")(publish.publish_workspace)
app.command(name="list")(list_cmd.list_packages)


def run():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    run()
