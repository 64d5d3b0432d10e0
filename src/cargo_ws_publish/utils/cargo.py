"""Cargo invocation helpers for the publish steps."""

from pathlib import Path

from cargo_ws_publish.config import DEFAULT_REGISTRY, get_logger, get_settings
from cargo_ws_publish.exceptions import CommandNotFoundError, DryRunError, PublishError
from cargo_ws_publish.utils.shell import run_command

logger = get_logger("cargo")


def cargo_bin() -> str:
    """Return the configured cargo executable."""
    return get_settings().cargo_bin


def build_publish_command(
    dry_run: bool = False,
    registry: str | None = None,
    allow_dirty: bool = False,
    no_verify: bool = False,
) -> list[str]:
    """Build the ``cargo publish`` argument list.

    Args:
        dry_run: Perform all checks without uploading
        registry: Target registry name; crates.io needs no flag
        allow_dirty: Allow uncommitted changes in the package
        no_verify: Skip building the packaged sources

    Returns:
        Command as a list of arguments
    """
    cmd = [cargo_bin(), "publish"]

    if dry_run:
        cmd.append("--dry-run")
    if registry and registry != DEFAULT_REGISTRY:
        cmd.extend(["--registry", registry])
    if allow_dirty:
        cmd.append("--allow-dirty")
    if no_verify:
        cmd.append("--no-verify")

    return cmd


def _run_publish(
    name: str,
    package_dir: Path,
    dry_run: bool,
    registry: str | None,
    allow_dirty: bool,
    no_verify: bool,
) -> str:
    cmd = build_publish_command(
        dry_run=dry_run,
        registry=registry,
        allow_dirty=allow_dirty,
        no_verify=no_verify,
    )

    try:
        result = run_command(cmd, cwd=package_dir)
    except FileNotFoundError as e:
        raise CommandNotFoundError(cmd[0]) from e

    if result.returncode != 0:
        logger.error(
            "cargo publish failed",
            package=name,
            dry_run=dry_run,
            returncode=result.returncode,
        )
        error_cls = DryRunError if dry_run else PublishError
        raise error_cls(name, result.stdout or "")

    logger.info("cargo publish succeeded", package=name, dry_run=dry_run)
    return result.stdout or ""


def dry_run_publish(
    name: str,
    package_dir: Path,
    registry: str | None = None,
    allow_dirty: bool = False,
    no_verify: bool = False,
) -> str:
    """Validate a package with ``cargo publish --dry-run``.

    Returns:
        Combined stdout/stderr of cargo

    Raises:
        DryRunError: cargo exited non-zero
        CommandNotFoundError: cargo is not installed
    """
    return _run_publish(name, package_dir, True, registry, allow_dirty, no_verify)


def publish(
    name: str,
    package_dir: Path,
    registry: str | None = None,
    allow_dirty: bool = False,
    no_verify: bool = False,
) -> str:
    """Publish a package with ``cargo publish``. This cannot be undone.

    Raises:
        PublishError: cargo exited non-zero
        CommandNotFoundError: cargo is not installed
    """
    return _run_publish(name, package_dir, False, registry, allow_dirty, no_verify)
