"""
Workspace discovery through ``cargo metadata``.

Only packages that live in the workspace itself (no registry, git or path
``source``) are considered for publishing. Dependency ordering is left to
cargo: packages are returned in the order metadata reports them.
"""

import json
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cargo_ws_publish.config import DEFAULT_REGISTRY, get_logger
from cargo_ws_publish.exceptions import (
    CommandNotFoundError,
    PublishToolError,
    WorkspaceMetadataError,
)
from cargo_ws_publish.utils.cargo import cargo_bin
from cargo_ws_publish.utils.shell import run_command

logger = get_logger("workspace")


@dataclass
class WorkspacePackage:
    """A crate that belongs to the workspace."""

    name: str
    version: str
    manifest_path: Path
    publish: list[str] | None = None
    source: str | None = None

    @property
    def directory(self) -> Path:
        """Directory holding the crate's Cargo.toml."""
        return self.manifest_path.parent

    @property
    def is_local(self) -> bool:
        return self.source is None

    @property
    def display_name(self) -> str:
        """Name as written in the manifest, falling back to the metadata name."""
        return read_manifest_name(self.manifest_path) or self.name

    def is_publishable(self, registry: str = DEFAULT_REGISTRY) -> bool:
        """Check whether the manifest allows publishing to ``registry``.

        ``publish = false`` shows up in metadata as an empty list; a list of
        names restricts publishing to those registries.
        """
        if self.publish is None:
            return True
        return registry in self.publish

    @classmethod
    def from_metadata(cls, entry: dict[str, Any]) -> "WorkspacePackage":
        """Create from one element of the metadata ``packages`` array."""
        try:
            return cls(
                name=entry["name"],
                version=entry.get("version", ""),
                manifest_path=Path(entry["manifest_path"]),
                publish=entry.get("publish"),
                source=entry.get("source"),
            )
        except (KeyError, TypeError) as e:
            raise WorkspaceMetadataError(f"Malformed package entry in metadata: {e}") from e


def read_manifest_name(manifest_path: Path) -> str | None:
    """Read ``[package].name`` from a Cargo.toml.

    Returns:
        The literal package name, or None when it cannot be read
    """
    try:
        with open(manifest_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Could not read manifest", manifest=str(manifest_path), error=str(e))
        return None

    name = data.get("package", {}).get("name")
    return name if isinstance(name, str) else None


def query_metadata(root: Path) -> dict[str, Any]:
    """Run ``cargo metadata`` for the workspace at ``root``.

    Args:
        root: Workspace root directory

    Returns:
        Parsed metadata document

    Raises:
        CommandNotFoundError: cargo is not installed
        WorkspaceMetadataError: cargo failed or printed something unusable
    """
    cargo = cargo_bin()
    cmd = [cargo, "metadata", "--no-deps", "--format-version=1"]

    try:
        result = run_command(cmd, cwd=root, merge_stderr=False)
    except FileNotFoundError as e:
        raise CommandNotFoundError(cargo) from e

    if result.returncode != 0:
        raise WorkspaceMetadataError(
            f"cargo metadata failed in {root}",
            output=result.stderr or result.stdout or "",
        )

    try:
        metadata = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise WorkspaceMetadataError(f"cargo metadata returned invalid JSON: {e}") from e

    if not isinstance(metadata, dict) or not isinstance(metadata.get("packages"), list):
        raise WorkspaceMetadataError("cargo metadata output has no packages array")

    return metadata


def parse_packages(metadata: dict[str, Any]) -> list[WorkspacePackage]:
    """Build the local workspace packages from a metadata document."""
    packages = [WorkspacePackage.from_metadata(entry) for entry in metadata.get("packages", [])]
    return [package for package in packages if package.is_local]


def discover_packages(root: Path) -> list[WorkspacePackage]:
    """Query metadata at ``root`` and return its local packages in order."""
    packages = parse_packages(query_metadata(root))
    logger.info("Discovered workspace packages", root=str(root), count=len(packages))
    return packages


def select_packages(
    packages: list[WorkspacePackage],
    include: Iterable[str] | None = None,
    exclude: Iterable[str] | None = None,
) -> list[WorkspacePackage]:
    """Filter packages by name, keeping metadata order.

    Args:
        packages: Discovered workspace packages
        include: Only keep these names (all when empty)
        exclude: Drop these names

    Raises:
        PublishToolError: an included name is not part of the workspace
    """
    include = list(include or [])
    exclude = set(exclude or [])
    known = {package.name for package in packages}

    missing = [name for name in include if name not in known]
    if missing:
        raise PublishToolError(
            f"Not a workspace package: {', '.join(missing)}. "
            f"Workspace packages: {', '.join(sorted(known))}"
        )

    for name in exclude - known:
        logger.warning("Excluded package is not in the workspace", package=name)

    selected = [p for p in packages if not include or p.name in include]
    return [p for p in selected if p.name not in exclude]
