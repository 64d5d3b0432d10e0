"""Common utilities shared across the CLI."""

from rich.console import Console

# Single shared console instance for the entire CLI
console = Console()
