"""Batch thumbnail generation for a whole output directory."""

from __future__ import annotations

import asyncio
import logging
import posixpath
from pathlib import Path
from typing import Callable

from adminthumbs.errors import ImageProcessingError, InvalidPathError
from adminthumbs.paths import resolve_source_path, sanitize_relative_path
from adminthumbs.thumbnails.cache import ThumbnailCache
from adminthumbs.thumbnails.config import CACHE_DIR_NAME, ResizeOptions

logger = logging.getLogger(__name__)


class GenerationResult:
    """Result of thumbnail generation batch."""

    def __init__(self) -> None:
        self.generated: int = 0
        self.skipped: int = 0
        self.failed: int = 0
        self.errors: list[tuple[str, str]] = []

    @property
    def total(self) -> int:
        return self.generated + self.skipped + self.failed


class ThumbnailGenerator:
    """Warms the thumbnail cache for many files with bounded concurrency."""

    def __init__(self, cache: ThumbnailCache) -> None:
        self.cache = cache
        self.config = cache.config

    def scan(self, output_dir: Path) -> list[str]:
        """List supported images below ``output_dir`` as relative POSIX paths."""
        output_dir = Path(output_dir)
        found = []
        for path in sorted(output_dir.rglob("*")):
            rel = path.relative_to(output_dir)
            if rel.parts and rel.parts[0] == CACHE_DIR_NAME:
                continue
            if not path.is_file():
                continue
            if path.suffix.lstrip(".").lower() in self.config.supported_input_formats:
                found.append(rel.as_posix())
        return found

    @staticmethod
    def _confine(output_dir: Path, rel_path: str) -> str:
        """Normalize a caller-supplied path, refusing anything outside ``output_dir``."""
        if posixpath.isabs(rel_path.replace("\\", "/")):
            raise InvalidPathError(rel_path)
        normalized = sanitize_relative_path(rel_path)
        if not normalized:
            raise InvalidPathError(rel_path)
        resolve_source_path(output_dir, normalized)
        return normalized

    async def generate(
        self,
        output_dir: Path,
        paths: list[str] | None = None,
        options: ResizeOptions | None = None,
        force: bool = False,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> GenerationResult:
        """Generate thumbnails for ``paths`` (default: everything in ``output_dir``).

        Paths that are absolute or leave ``output_dir`` are counted as failures.
        """
        result = GenerationResult()
        paths = self.scan(output_dir) if paths is None else paths
        options = options or ResizeOptions.normalize(config=self.config)
        semaphore = asyncio.Semaphore(max(1, self.config.workers))
        total = len(paths)
        completed = 0

        async def run(rel_path: str) -> None:
            nonlocal completed
            async with semaphore:
                try:
                    normalized = self._confine(output_dir, rel_path)
                    thumb = await self.cache.get_or_create(
                        output_dir, normalized, options, force=force
                    )
                    if thumb.generated:
                        result.generated += 1
                    else:
                        result.skipped += 1
                except InvalidPathError as e:
                    result.failed += 1
                    result.errors.append((rel_path, str(e)))
                    logger.warning(f"Skipping {rel_path!r}: not inside {output_dir}")
                except ImageProcessingError as e:
                    result.failed += 1
                    result.errors.append((rel_path, e.reason))
                    logger.warning(f"Skipping {rel_path}: {e.reason}")
            completed += 1
            if progress_callback:
                progress_callback(completed, total)

        await asyncio.gather(*(run(p) for p in paths))
        return result
