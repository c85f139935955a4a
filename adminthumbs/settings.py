"""Application settings."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from adminthumbs.thumbnails.config import ThumbnailConfig

OUTPUT_DIR_ENV = "OUTPUT_DIR"


class Settings(BaseModel):
    """Settings for the thumbnail service."""

    output_dir: Path | None = Field(
        default=None, description="Output directory (overridden by $OUTPUT_DIR)"
    )
    workspace_root: Path = Field(
        default_factory=Path.cwd, description="Root holding the default 'output' folder"
    )
    thumbnail_cache_control: str = Field(
        default="public, max-age=86400", description="Cache-Control for thumbnails"
    )
    log_level: str = Field(default="INFO")
    thumbnails: ThumbnailConfig = Field(default_factory=ThumbnailConfig)

    def resolve_output_dir(self) -> Path:
        """Resolve the output directory.

        Read on every call so ``$OUTPUT_DIR`` can change after startup.
        """
        env_dir = os.environ.get(OUTPUT_DIR_ENV)
        if env_dir:
            return Path(env_dir).resolve()
        if self.output_dir is not None:
            return Path(self.output_dir).resolve()
        return (self.workspace_root / "output").resolve()

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)
