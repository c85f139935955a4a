"""Tests for thumbnail configuration and resize options."""

from __future__ import annotations

from pathlib import Path

import pytest

from adminthumbs.thumbnails import ResizeOptions, ThumbnailConfig


class TestResizeOptions:
    """Tests for ResizeOptions.normalize."""

    def test_defaults(self) -> None:
        options = ResizeOptions.normalize()
        assert (options.width, options.height, options.quality) == (480, 0, 75)

    @pytest.mark.parametrize(
        ("w", "expected"),
        [(None, 480), (0, 480), ("abc", 480), (float("nan"), 480), (10, 32), (5000, 2048), ("200", 200), (200.7, 200)],
    )
    def test_width(self, w, expected: int) -> None:
        assert ResizeOptions.normalize(w=w).width == expected

    @pytest.mark.parametrize(("h", "expected"), [(None, 0), (-5, 0), (300, 300), (9999, 2048)])
    def test_height(self, h, expected: int) -> None:
        assert ResizeOptions.normalize(h=h).height == expected

    @pytest.mark.parametrize(("quality", "expected"), [(None, 75), (10, 40), (95, 90), (60, 60)])
    def test_quality(self, quality, expected: int) -> None:
        assert ResizeOptions.normalize(quality=quality).quality == expected

    def test_config_defaults(self) -> None:
        config = ThumbnailConfig(default_width=256, default_quality=85)
        options = ResizeOptions.normalize(config=config)
        assert (options.width, options.quality) == (256, 85)


class TestThumbnailConfig:
    """Tests for cache path layout."""

    def test_thumbnail_path_strips_extension(self) -> None:
        config = ThumbnailConfig()
        path = config.get_thumbnail_path(Path("/out"), "a.b.c.png")
        assert path == Path("/out/.thumbs/a.b.c.jpg")

    def test_thumbnail_path_keeps_folders(self) -> None:
        config = ThumbnailConfig()
        assert config.get_thumbnail_path(Path("/out"), "x/y/z.webp") == Path(
            "/out/.thumbs/x/y/z.jpg"
        )

    def test_extension_collision_is_configurable(self) -> None:
        default = ThumbnailConfig()
        assert default.get_thumbnail_path(Path("/out"), "photo.png") == default.get_thumbnail_path(
            Path("/out"), "photo.jpg"
        )

        keyed = ThumbnailConfig(key_includes_extension=True)
        assert keyed.get_thumbnail_path(Path("/out"), "photo.png") != keyed.get_thumbnail_path(
            Path("/out"), "photo.jpg"
        )

    def test_supported_formats(self) -> None:
        formats = ThumbnailConfig().supported_input_formats
        assert {"png", "jpg", "webp"} <= formats
        assert "svg" not in formats
