"""Tests for application settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from adminthumbs.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_default_output_dir(self, temp_dir: Path) -> None:
        settings = Settings(workspace_root=temp_dir)
        assert settings.resolve_output_dir() == temp_dir / "output"

    def test_configured_output_dir(self, temp_dir: Path) -> None:
        settings = Settings(output_dir=temp_dir / "media", workspace_root=temp_dir)
        assert settings.resolve_output_dir() == temp_dir / "media"

    def test_env_wins_and_is_read_each_time(
        self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        settings = Settings(output_dir=temp_dir / "media")

        monkeypatch.setenv("OUTPUT_DIR", str(temp_dir / "first"))
        assert settings.resolve_output_dir() == temp_dir / "first"

        monkeypatch.setenv("OUTPUT_DIR", str(temp_dir / "second"))
        assert settings.resolve_output_dir() == temp_dir / "second"

        monkeypatch.delenv("OUTPUT_DIR")
        assert settings.resolve_output_dir() == temp_dir / "media"

    def test_from_yaml(self, temp_dir: Path) -> None:
        config = temp_dir / "settings.yaml"
        config.write_text(
            f"output_dir: {temp_dir / 'out'}\n"
            "thumbnail_cache_control: 'public, max-age=10'\n"
            "thumbnails:\n"
            "  default_width: 256\n"
            "  key_includes_extension: true\n"
        )

        settings = Settings.from_yaml(config)

        assert settings.resolve_output_dir() == temp_dir / "out"
        assert settings.thumbnail_cache_control == "public, max-age=10"
        assert settings.thumbnails.default_width == 256
        assert settings.thumbnails.key_includes_extension is True

    def test_from_empty_yaml(self, temp_dir: Path) -> None:
        config = temp_dir / "empty.yaml"
        config.write_text("")

        assert Settings.from_yaml(config).thumbnail_cache_control == "public, max-age=86400"
