"""Command modules for workspace publishing."""

from . import list_cmd, publish

__all__ = ["list_cmd", "publish"]
