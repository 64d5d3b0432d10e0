"""Utility modules for shell and cargo operations."""

from .cargo import build_publish_command, dry_run_publish, publish
from .shell import run_command

__all__ = [
    "build_publish_command",
    "dry_run_publish",
    "publish",
    "run_command",
]
