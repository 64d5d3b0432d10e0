"""
Pytest configuration and fixtures for cargo-ws-publish tests.

No test runs a real cargo: ``FakeCargo`` stands in for the subprocess seam
and records every invocation together with the process working directory.
"""

import json
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest

from cargo_ws_publish import workspace as workspace_module
from cargo_ws_publish.config import get_settings
from cargo_ws_publish.utils import cargo as cargo_module

CRATES_IO_SOURCE = "registry+https://github.com/rust-lang/crates.io-index"


@dataclass
class CargoCall:
    command: list[str]
    cwd: Path | None
    process_cwd: Path

    @property
    def is_metadata(self) -> bool:
        return self.command[1] == "metadata"

    @property
    def is_dry_run(self) -> bool:
        return self.command[1] == "publish" and "--dry-run" in self.command

    @property
    def is_publish(self) -> bool:
        return self.command[1] == "publish" and "--dry-run" not in self.command


class FakeCargo:
    """Callable replacement for ``run_command``."""

    def __init__(self, metadata: dict | None = None):
        self.metadata = metadata if metadata is not None else {"packages": []}
        self.metadata_stdout: str | None = None
        self.metadata_returncode = 0
        self.failures: dict[tuple[str, str], str] = {}
        self.calls: list[CargoCall] = []

    def fail(self, crate: str, step: str, output: str) -> None:
        """Make ``step`` ("dry-run" or "publish") fail for the crate directory ``crate``."""
        self.failures[(crate, step)] = output

    def __call__(self, command, cwd=None, merge_stderr=True):
        call = CargoCall(
            command=list(command),
            cwd=Path(cwd) if cwd is not None else None,
            process_cwd=Path.cwd(),
        )
        self.calls.append(call)

        if call.is_metadata:
            stdout = self.metadata_stdout
            if stdout is None:
                stdout = json.dumps(self.metadata)
            stderr = "error: could not find `Cargo.toml`" if self.metadata_returncode else ""
            return subprocess.CompletedProcess(command, self.metadata_returncode, stdout, stderr)

        crate = call.cwd.name if call.cwd else Path.cwd().name
        step = "dry-run" if call.is_dry_run else "publish"
        if (crate, step) in self.failures:
            return subprocess.CompletedProcess(command, 101, self.failures[(crate, step)], None)

        return subprocess.CompletedProcess(command, 0, f"   Packaging {crate}\n", None)

    @property
    def dry_runs(self) -> list[CargoCall]:
        return [c for c in self.calls if c.is_dry_run]

    @property
    def publishes(self) -> list[CargoCall]:
        return [c for c in self.calls if c.is_publish]


def write_manifest(root: Path, name: str, version: str = "0.1.0", publish: bool = True) -> Path:
    crate_dir = root / name
    crate_dir.mkdir(parents=True)
    lines = ["[package]", f'name = "{name}"', f'version = "{version}"', 'edition = "2021"']
    if not publish:
        lines.append("publish = false")
    manifest = crate_dir / "Cargo.toml"
    manifest.write_text("\n".join(lines) + "\n")
    return manifest


def metadata_entry(
    manifest: Path | str,
    name: str,
    version: str = "0.1.0",
    publish: list[str] | None = None,
    source: str | None = None,
) -> dict:
    return {
        "name": name,
        "version": version,
        "id": f"{name} {version}",
        "manifest_path": str(manifest),
        "publish": publish,
        "source": source,
    }


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env files."""
    for key in list(os.environ):
        if key.startswith("CARGO_WS_PUBLISH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def workspace_root(tmp_path) -> Path:
    """A workspace with two publishable crates and one ``publish = false`` crate."""
    root = tmp_path / "workspace"
    root.mkdir()
    (root / "Cargo.toml").write_text('[workspace]\nmembers = ["*"]\nresolver = "2"\n')

    write_manifest(root, "demo-core", "0.3.0")
    write_manifest(root, "demo-internal", "0.0.1", publish=False)
    write_manifest(root, "demo-web", "0.3.0")
    return root


@pytest.fixture
def workspace_metadata(workspace_root) -> dict:
    return {
        "packages": [
            metadata_entry(workspace_root / "demo-core" / "Cargo.toml", "demo-core", "0.3.0"),
            metadata_entry(
                workspace_root / "demo-internal" / "Cargo.toml",
                "demo-internal",
                "0.0.1",
                publish=[],
            ),
            metadata_entry(workspace_root / "demo-web" / "Cargo.toml", "demo-web", "0.3.0"),
            metadata_entry(
                "/home/user/.cargo/registry/src/serde-1.0.0/Cargo.toml",
                "serde",
                "1.0.0",
                source=CRATES_IO_SOURCE,
            ),
        ],
        "workspace_root": str(workspace_root),
        "version": 1,
    }


@pytest.fixture
def fake_cargo(monkeypatch, workspace_metadata) -> FakeCargo:
    """Route every cargo invocation to a recording fake."""
    fake = FakeCargo(workspace_metadata)
    monkeypatch.setattr(cargo_module, "run_command", fake)
    monkeypatch.setattr(workspace_module, "run_command", fake)
    return fake
