"""Exceptions raised by the thumbnail subsystem."""

from __future__ import annotations


class ThumbnailError(Exception):
    """Base class for thumbnail errors."""


class InvalidPathError(ThumbnailError):
    """Requested sub-path escapes the output directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid path: {path!r}")
        self.path = path


class NotFoundError(ThumbnailError):
    """Source image does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Source file not found: {path}")
        self.path = path


class ImageProcessingError(ThumbnailError):
    """Decoding, resizing, encoding or writing a thumbnail failed."""

    def __init__(self, source: str, cache_path: str, reason: str) -> None:
        super().__init__(f"Failed generating thumbnail for {source} -> {cache_path}: {reason}")
        self.source = source
        self.cache_path = cache_path
        self.reason = reason
