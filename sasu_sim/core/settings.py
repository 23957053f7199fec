"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).parent.parent.parent


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Feature flags
    debug_mode: bool = Field(default=False, description="Enable debug features")
    enable_export: bool = Field(default=True, description="Enable result export")

    # Storage
    storage_backend: Literal["file", "memory"] = Field(
        default="file", description="Key-value storage backend"
    )
    storage_path: Path = Field(
        default=PROJECT_ROOT / "data" / "storage.json",
        description="JSON file used by the file backend",
    )
    export_dir: Path = Field(default=PROJECT_ROOT / "results", description="Export directory")

    # Simulations
    default_simulation_name: str = Field(default="Simulation 1", min_length=1)
    sensitivity_steps: int = Field(default=11, ge=3, le=51)

    model_config = {
        "env_prefix": "SASUSIM_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
