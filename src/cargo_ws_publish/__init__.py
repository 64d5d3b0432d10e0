"""
cargo-ws-publish: dry-run validation and confirmed publishing for Cargo workspaces.

Discovers the local crates of a workspace, validates each one with
``cargo publish --dry-run`` and asks before the real, irreversible publish.
"""

# Version is read from package metadata (pyproject.toml is the single source of truth)
try:
    from importlib.metadata import version

    __version__ = version("cargo-ws-publish")
except Exception:
    __version__ = "0.0.0+unknown"
