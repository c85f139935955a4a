"""Thumbnail configuration, resize options and cache path layout."""

from __future__ import annotations

import math
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, Field

CACHE_DIR_NAME = ".thumbs"
CACHE_EXT = "jpg"

MIN_WIDTH = 32
MAX_DIMENSION = 2048
MIN_QUALITY = 40
MAX_QUALITY = 90


def _clamp(value: Any, default: float, low: float, high: float) -> int:
    """Clamp a loosely typed number, treating missing/zero/NaN as ``default``."""
    try:
        number = float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        number = 0.0
    if not number or math.isnan(number):
        number = default
    return int(max(low, min(high, number)))


class ThumbnailConfig(BaseModel):
    """Configuration for thumbnail generation."""

    default_width: int = Field(default=480, description="Bounding width when none is requested")
    default_quality: int = Field(default=75, description="JPEG quality when none is requested")
    background_color: str = Field(
        default="#ffffff", description="Background used to flatten transparency (hex)"
    )
    key_includes_extension: bool = Field(
        default=False,
        description="Keep the source extension in the cache filename (photo.png.jpg)",
    )
    workers: int = Field(default=4, description="Concurrent generations in batch mode")

    @property
    def supported_input_formats(self) -> set[str]:
        """File formats that can be rendered as thumbnails."""
        return {"png", "jpg", "jpeg", "gif", "webp", "bmp", "tif", "tiff"}

    def get_cache_dir(self, output_dir: Path) -> Path:
        """Root of the thumbnail cache for an output directory."""
        return Path(output_dir) / CACHE_DIR_NAME

    def get_thumbnail_path(self, output_dir: Path, relative_path: str) -> Path:
        """Get the cache file path for a source file.

        The filename loses its extension and gains ``.jpg``; parent folders of
        ``relative_path`` are kept below the cache directory.
        """
        rel = PurePosixPath(relative_path.replace("\\", "/"))
        stem = rel.name if self.key_includes_extension else rel.stem
        cache_dir = self.get_cache_dir(output_dir).joinpath(*rel.parent.parts)
        return cache_dir / f"{stem}.{CACHE_EXT}"


class ResizeOptions(BaseModel):
    """Normalized resize request. ``height == 0`` derives it from the aspect ratio."""

    width: int = Field(default=480, ge=MIN_WIDTH, le=MAX_DIMENSION)
    height: int = Field(default=0, ge=0, le=MAX_DIMENSION)
    quality: int = Field(default=75, ge=MIN_QUALITY, le=MAX_QUALITY)

    @classmethod
    def normalize(
        cls,
        w: Any = None,
        h: Any = None,
        quality: Any = None,
        config: ThumbnailConfig | None = None,
    ) -> ResizeOptions:
        """Clamp raw request values into the supported ranges."""
        config = config or ThumbnailConfig()
        return cls(
            width=_clamp(w, config.default_width, MIN_WIDTH, MAX_DIMENSION),
            height=_clamp(h, 0, 0, MAX_DIMENSION),
            quality=_clamp(quality, config.default_quality, MIN_QUALITY, MAX_QUALITY),
        )
