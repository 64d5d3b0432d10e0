"""
Configuration management for cargo-ws-publish.

Settings come from ``CARGO_WS_PUBLISH_*`` environment variables or a local
``.env`` file. Command-line options override them per invocation.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cargo_ws_publish.logger import ScopedLogger

APP_NAME = "cargo-ws-publish"

# Registry name cargo uses for crates.io in `package.publish` lists
DEFAULT_REGISTRY = "crates-io"


class PublishSettings(BaseSettings):
    """Tool configuration using Pydantic Settings."""

    model_config = SettingsConfigDict(
        env_prefix="CARGO_WS_PUBLISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    cargo_bin: str = "cargo"
    registry: str = DEFAULT_REGISTRY

    # Seconds to wait after a real publish so the registry index catches up
    sync_wait: float = Field(default=10.0, ge=0)

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"


@lru_cache
def get_settings() -> PublishSettings:
    """Get cached settings instance."""
    return PublishSettings()


def get_logger(scope: str) -> ScopedLogger:
    """Get a scoped logger for a specific module or component.

    Args:
        scope: The name/scope for the logger (e.g., "workspace", "cargo")

    Returns:
        Scoped logger instance
    """
    settings = get_settings()
    return ScopedLogger(
        name=scope,
        level=settings.log_level,
        json_output=settings.log_format == "json",
        context={"app_name": APP_NAME, "component": scope},
    )
