"""Shell command utilities."""

import subprocess
from pathlib import Path

from cargo_ws_publish.config import get_logger

logger = get_logger("shell")


def run_command(
    command: list[str],
    cwd: Path | str | None = None,
    merge_stderr: bool = True,
) -> subprocess.CompletedProcess:
    """Run a command and capture its output as text.

    Args:
        command: Command and arguments as list
        cwd: Working directory for the command
        merge_stderr: Fold stderr into stdout, keeping the tool's own ordering

    Returns:
        CompletedProcess instance with results
    """
    logger.debug("Running command", command=" ".join(command), cwd=str(cwd or Path.cwd()))

    try:
        return subprocess.run(
            command,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            text=True,
        )
    except subprocess.SubprocessError as e:
        logger.error(f"Command failed: {e}")
        raise
