"""Confine requested sub-paths to the output directory."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path

from adminthumbs.errors import InvalidPathError, NotFoundError


def sanitize_relative_path(raw: str) -> str:
    """Normalize a requested sub-path and drop leading ``/`` and ``./`` segments.

    Dots inside names are left alone (``a.b.c.png`` stays ``a.b.c.png``).

    Raises:
        InvalidPathError: if the path still climbs above its root after
            normalization or contains a NUL byte
    """
    if "\x00" in raw:
        raise InvalidPathError(raw)
    path = raw.replace("\\", "/")
    if not path:
        return ""
    path = posixpath.normpath(path).lstrip("/")
    if path in ("", "."):
        return ""
    if path == ".." or path.startswith("../"):
        raise InvalidPathError(raw)
    return path


def resolve_source_path(output_dir: Path, relative_path: str) -> Path:
    """Join ``relative_path`` onto ``output_dir``, refusing anything outside it.

    Symlinks are followed for the containment check, so a link inside the
    output directory that points elsewhere is refused too.
    """
    base = os.path.normpath(str(output_dir))
    target = os.path.normpath(os.path.join(base, relative_path))
    rel = os.path.relpath(target, base)
    if os.path.isabs(rel) or rel.split(os.sep)[0] == os.pardir:
        raise InvalidPathError(relative_path)
    if not Path(target).resolve().is_relative_to(Path(base).resolve()):
        raise InvalidPathError(relative_path)
    return Path(target)


def locate_source(output_dir: Path, rest: str) -> tuple[str, Path]:
    """Sanitize ``rest`` and find the file it names inside ``output_dir``.

    Returns:
        The sanitized relative path and the absolute source path

    Raises:
        InvalidPathError: if the path escapes ``output_dir``
        NotFoundError: if no regular file exists at the resolved path
    """
    normalized = sanitize_relative_path(rest)
    source_path = resolve_source_path(output_dir, normalized)
    if not source_path.is_file():
        raise NotFoundError(str(source_path))
    return normalized, source_path
