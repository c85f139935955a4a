"""FastAPI application factories."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

from adminthumbs.api.routes import create_thumbnail_router
from adminthumbs.errors import InvalidPathError, NotFoundError
from adminthumbs.paths import locate_source
from adminthumbs.settings import Settings
from adminthumbs.thumbnails.cache import ThumbnailCache

TEST_CACHE_CONTROL = "public, max-age=60"


def create_app(
    settings: Settings | None = None,
    cache: ThumbnailCache | None = None,
) -> FastAPI:
    """Create the media preview application.

    Mounts the thumbnail routes, a passthrough for original output files and a
    readiness probe. The output directory is resolved per request.
    """
    settings = settings or Settings()
    cache = cache or ThumbnailCache(config=settings.thumbnails)

    app = FastAPI(title="Admin Thumbnails")
    app.include_router(
        create_thumbnail_router(
            settings.resolve_output_dir,
            cache,
            cache_control=settings.thumbnail_cache_control,
        )
    )

    @app.get("/output/{rest:path}")
    async def get_output_file(rest: str) -> FileResponse:
        """Serve an original output file."""
        output_dir = settings.resolve_output_dir()
        try:
            _, file_path = locate_source(output_dir, rest)
        except InvalidPathError:
            raise HTTPException(status_code=400, detail="Invalid path")
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Not found")
        return FileResponse(file_path)

    @app.get("/api/__ready")
    async def ready() -> dict[str, bool]:
        return {"ok": True}

    return app


def create_thumbnail_test_app(
    output_dir: Path,
    cache: ThumbnailCache | None = None,
) -> FastAPI:
    """Create a minimal app with only the thumbnail route over a fixed directory.

    Responses carry a short cache lifetime and a strong ETag.
    """
    output_dir = Path(output_dir).resolve()
    app = FastAPI(title="Admin Thumbnails (isolated)")
    app.include_router(
        create_thumbnail_router(
            lambda: output_dir,
            cache or ThumbnailCache(),
            cache_control=TEST_CACHE_CONTROL,
            strong_etag=True,
        )
    )
    return app
