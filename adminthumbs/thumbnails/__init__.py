"""Thumbnail generation and caching module."""

from adminthumbs.thumbnails.cache import (
    ThumbnailCache,
    ThumbnailResult,
    ThumbnailStats,
    compute_target_size,
)
from adminthumbs.thumbnails.codec import FakeCodec, ImageCodec, PillowCodec
from adminthumbs.thumbnails.config import ResizeOptions, ThumbnailConfig
from adminthumbs.thumbnails.generator import GenerationResult, ThumbnailGenerator

__all__ = [
    "FakeCodec",
    "GenerationResult",
    "ImageCodec",
    "PillowCodec",
    "ResizeOptions",
    "ThumbnailCache",
    "ThumbnailConfig",
    "ThumbnailGenerator",
    "ThumbnailResult",
    "ThumbnailStats",
    "compute_target_size",
]
