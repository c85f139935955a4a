"""adminthumbs - On-demand cached thumbnails for an admin media panel."""

from adminthumbs.settings import Settings
from adminthumbs.thumbnails import ResizeOptions, ThumbnailCache, ThumbnailConfig

__version__ = "0.1.0"
__all__ = ["ResizeOptions", "Settings", "ThumbnailCache", "ThumbnailConfig"]
