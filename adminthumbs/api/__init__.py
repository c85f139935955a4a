"""FastAPI app and routes for output thumbnails."""

from adminthumbs.api.app import create_app, create_thumbnail_test_app
from adminthumbs.api.routes import (
    ThumbnailAPI,
    create_thumbnail_router,
    locate_source,
    resolve_source_path,
    sanitize_relative_path,
)

__all__ = [
    "ThumbnailAPI",
    "create_app",
    "create_thumbnail_router",
    "create_thumbnail_test_app",
    "locate_source",
    "resolve_source_path",
    "sanitize_relative_path",
]
