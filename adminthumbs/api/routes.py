"""FastAPI router serving resized thumbnails of output files.

Usage:
    from fastapi import FastAPI
    from adminthumbs.api import create_thumbnail_router
    from adminthumbs.settings import Settings
    from adminthumbs.thumbnails import ThumbnailCache

    settings = Settings()
    app = FastAPI()
    app.include_router(
        create_thumbnail_router(settings.resolve_output_dir, ThumbnailCache())
    )
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from adminthumbs.errors import InvalidPathError, NotFoundError
from adminthumbs.paths import locate_source, resolve_source_path, sanitize_relative_path
from adminthumbs.thumbnails.cache import ThumbnailCache

__all__ = [
    "DEFAULT_CACHE_CONTROL",
    "ThumbnailAPI",
    "create_thumbnail_router",
    "etag_matches",
    "locate_source",
    "make_etag",
    "parse_positive_number",
    "resolve_source_path",
    "sanitize_relative_path",
]

logger = logging.getLogger(__name__)

DEFAULT_CACHE_CONTROL = "public, max-age=86400"

def parse_positive_number(value: str | None) -> float | None:
    """Parse a query value as a positive number, ``None`` otherwise."""
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if number > 0 else None


def make_etag(data: bytes) -> str:
    """Strong entity tag for a response body."""
    return f'"{hashlib.sha256(data).hexdigest()}"'


def etag_matches(etag: str, if_none_match: str | None) -> bool:
    """Check an ``If-None-Match`` header against ``etag``."""
    if not if_none_match:
        return False
    candidates = [tag.strip() for tag in if_none_match.split(",")]
    return any(
        tag == "*" or tag.removeprefix("W/") == etag for tag in candidates
    )


class ThumbnailAPI:
    """Holds the collaborators of the thumbnail routes."""

    def __init__(
        self,
        resolve_output_dir: Callable[[], Path],
        cache: ThumbnailCache,
    ) -> None:
        self.resolve_output_dir = resolve_output_dir
        self.cache = cache


def create_thumbnail_router(
    resolve_output_dir: Callable[[], Path],
    cache: ThumbnailCache,
    *,
    prefix: str = "/thumbs/output",
    tags: list[str] | None = None,
    cache_control: str | None = None,
    strong_etag: bool = False,
) -> APIRouter:
    """Create a FastAPI router serving thumbnails of files in the output directory.

    Args:
        resolve_output_dir: Called on every request to find the output directory
        cache: Thumbnail cache used to create or reuse thumbnails
        prefix: URL prefix (default: /thumbs/output)
        tags: OpenAPI tags for the router
        cache_control: Cache-Control header value for served thumbnails
        strong_etag: Send a content ETag and answer matching conditional GETs with 304

    Returns:
        APIRouter that can be included in a FastAPI app
    """
    if tags is None:
        tags = ["thumbnails"]
    if cache_control is None:
        cache_control = DEFAULT_CACHE_CONTROL

    router = APIRouter(prefix=prefix, tags=tags)
    api = ThumbnailAPI(resolve_output_dir, cache)

    @router.get("/{rest:path}")
    async def get_output_thumbnail(
        rest: str,
        request: Request,
        w: str | None = None,
        h: str | None = None,
    ) -> Response:
        """Serve a resized JPEG preview of an output file."""
        output_dir = api.resolve_output_dir()
        try:
            normalized, _ = locate_source(output_dir, rest)
        except InvalidPathError:
            logger.warning(f"Rejected thumbnail path {rest!r} (output_dir={output_dir})")
            raise HTTPException(status_code=400, detail="Invalid path")
        except NotFoundError as e:
            logger.warning(
                f"Original file missing: {e.path} (output_dir={output_dir}, requested={rest})"
            )
            raise HTTPException(status_code=404, detail="Not found")

        options = {"w": parse_positive_number(w), "h": parse_positive_number(h)}
        try:
            result = await api.cache.get_or_create(output_dir, normalized, options)
            data = result.file_path.read_bytes()
        except Exception as e:
            logger.error(f"Error serving output thumbnail for {normalized}: {e}")
            raise HTTPException(status_code=404, detail="Thumbnail not available")

        headers = {"Cache-Control": cache_control}
        if strong_etag:
            etag = make_etag(data)
            headers["ETag"] = etag
            if etag_matches(etag, request.headers.get("if-none-match")):
                return Response(status_code=304, headers=headers)
        return Response(content=data, media_type="image/jpeg", headers=headers)

    return router
