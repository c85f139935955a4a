"""Filesystem thumbnail cache for files in an output directory.

Thumbnails live under ``<output_dir>/.thumbs`` and are regenerated whenever the
source file is newer than the cached JPEG.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from adminthumbs.errors import ImageProcessingError
from adminthumbs.thumbnails.codec import ImageCodec, PillowCodec
from adminthumbs.thumbnails.config import ResizeOptions, ThumbnailConfig

logger = logging.getLogger(__name__)


class ThumbnailResult(BaseModel):
    """Outcome of a cache lookup."""

    file_path: Path
    generated: bool
    width: int | None = None
    height: int | None = None


class ThumbnailStats(BaseModel):
    """Statistics for a thumbnail cache directory."""

    total_count: int
    total_size_bytes: int


def compute_target_size(
    src_width: int, src_height: int, width: int, height: int = 0
) -> tuple[int, int]:
    """Fit ``src`` inside a ``width`` x ``height`` box without enlarging it.

    ``height == 0`` means the box is ``width`` on both sides, so the long edge
    is capped at ``width``.
    """
    box_height = height or width
    if width >= src_width and box_height >= src_height:
        return src_width, src_height
    if width / src_width <= box_height / src_height:
        target_w = width
        target_h = round(width * src_height / src_width)
    else:
        target_h = box_height
        target_w = round(box_height * src_width / src_height)
    return max(1, target_w), max(1, target_h)


def is_fresh(cache_file: Path, source_file: Path) -> bool:
    """A cached file is fresh when it is at least as new as its source."""
    try:
        return cache_file.stat().st_mtime >= source_file.stat().st_mtime
    except OSError:
        return False


class ThumbnailCache:
    """Creates and reuses JPEG thumbnails for files in an output directory."""

    def __init__(
        self,
        codec: ImageCodec | None = None,
        config: ThumbnailConfig | None = None,
    ) -> None:
        self.config = config or ThumbnailConfig()
        self.codec = codec or PillowCodec(self.config.background_color)
        self._locks: dict[Path, asyncio.Lock] = {}
        self._pending: dict[Path, int] = {}

    def cache_path_for(self, output_dir: Path, relative_path: str) -> Path:
        """Get the cache file path for ``relative_path`` inside ``output_dir``."""
        return self.config.get_thumbnail_path(Path(output_dir), relative_path)

    async def get_or_create(
        self,
        output_dir: Path,
        relative_path: str,
        options: ResizeOptions | dict[str, Any] | None = None,
        *,
        force: bool = False,
    ) -> ThumbnailResult:
        """Return an up-to-date thumbnail for ``relative_path``, rendering it if needed.

        Args:
            output_dir: Absolute output directory
            relative_path: Sanitized path of the source inside ``output_dir``
            options: ``ResizeOptions`` or a raw ``{"w", "h", "quality"}`` mapping
            force: Regenerate even if the cached file is fresh

        Raises:
            ImageProcessingError: if the source cannot be read or encoded, or
                the thumbnail cannot be written
        """
        if not isinstance(options, ResizeOptions):
            raw = options or {}
            options = ResizeOptions.normalize(
                raw.get("w"), raw.get("h"), raw.get("quality"), config=self.config
            )

        output_dir = Path(output_dir)
        source_path = output_dir / relative_path
        cache_file = self.cache_path_for(output_dir, relative_path)

        if not force and is_fresh(cache_file, source_path):
            return ThumbnailResult(file_path=cache_file, generated=False)

        self._pending[cache_file] = self._pending.get(cache_file, 0) + 1
        lock = self._locks.setdefault(cache_file, asyncio.Lock())
        try:
            async with lock:
                # Another request may have rendered it while we waited
                if not force and is_fresh(cache_file, source_path):
                    return ThumbnailResult(file_path=cache_file, generated=False)
                width, height = await asyncio.to_thread(
                    self._render, source_path, cache_file, options
                )
        finally:
            self._pending[cache_file] -= 1
            if not self._pending[cache_file]:
                del self._pending[cache_file]
                del self._locks[cache_file]

        logger.info(f"Generated thumbnail for {relative_path} -> {cache_file}")
        return ThumbnailResult(file_path=cache_file, generated=True, width=width, height=height)

    def _render(
        self, source_path: Path, cache_file: Path, options: ResizeOptions
    ) -> tuple[int, int]:
        """Render ``source_path`` into ``cache_file`` (runs in a worker thread)."""
        try:
            source_mtime = source_path.stat().st_mtime
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            src_width, src_height = self.codec.read_size(source_path)
            size = compute_target_size(src_width, src_height, options.width, options.height)
            data = self.codec.render_jpeg(
                source_path, size, quality=options.quality, progressive=True
            )
            self._write_atomic(cache_file, data, source_mtime)
        except Exception as e:
            logger.error(
                f"Failed generating thumbnail for {source_path.name} -> {cache_file}: {e}"
            )
            raise ImageProcessingError(str(source_path.name), str(cache_file), str(e)) from e
        return size

    @staticmethod
    def _write_atomic(cache_file: Path, data: bytes, source_mtime: float) -> None:
        """Write ``data`` next to ``cache_file`` and rename it into place."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{cache_file.stem}.", suffix=".tmp", dir=cache_file.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, cache_file)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        # Sources stamped in the future would otherwise never look fresh
        if cache_file.stat().st_mtime < source_mtime:
            os.utime(cache_file, (source_mtime, source_mtime))

    def get_stats(self, output_dir: Path) -> ThumbnailStats:
        """Get count and total size of cached thumbnails."""
        cache_dir = self.config.get_cache_dir(Path(output_dir))
        count = 0
        size = 0
        if cache_dir.exists():
            for path in cache_dir.rglob("*.jpg"):
                if path.is_file():
                    count += 1
                    size += path.stat().st_size
        return ThumbnailStats(total_count=count, total_size_bytes=size)
