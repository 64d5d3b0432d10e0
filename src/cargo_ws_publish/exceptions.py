"""
Custom exceptions for cargo-ws-publish.
"""


class PublishToolError(Exception):
    """Base exception for all workspace publishing errors."""

    pass


class CommandNotFoundError(PublishToolError):
    """Raised when a required executable is not on PATH."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"{command} not found - is it installed and on PATH?")


class WorkspaceMetadataError(PublishToolError):
    """Raised when workspace metadata cannot be queried or parsed."""

    def __init__(self, message: str, output: str = ""):
        self.output = output
        super().__init__(message)


class PackageCommandError(PublishToolError):
    """Raised when a cargo command fails for a single package."""

    action = "command"

    def __init__(self, package: str, output: str = ""):
        self.package = package
        self.output = output
        super().__init__(f"{self.action} failed: {package}")


class DryRunError(PackageCommandError):
    """Raised when ``cargo publish --dry-run`` fails."""

    action = "dry-run"


class PublishError(PackageCommandError):
    """Raised when ``cargo publish`` fails."""

    action = "publish"
