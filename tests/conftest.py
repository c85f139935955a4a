"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from adminthumbs.settings import OUTPUT_DIR_ENV


@pytest.fixture(autouse=True)
def clean_output_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's $OUTPUT_DIR from leaking into tests."""
    monkeypatch.delenv(OUTPUT_DIR_ENV, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


def make_image(path: Path, size: tuple[int, int], mode: str = "RGB") -> Path:
    """Write a solid-colour image to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    color = (200, 100, 50, 128) if mode == "RGBA" else (200, 100, 50)
    Image.new(mode, size, color).save(path)
    return path


@pytest.fixture
def image_factory():
    """Factory writing solid-colour test images."""
    return make_image


@pytest.fixture
def output_dir(temp_dir: Path) -> Path:
    """Output directory holding a 120x80 ``sample.png``."""
    out = temp_dir / "output"
    make_image(out / "sample.png", (120, 80))
    return out


@pytest.fixture
def fake_codec():
    from adminthumbs.thumbnails import FakeCodec

    return FakeCodec()


@pytest.fixture
def fake_cache(fake_codec):
    from adminthumbs.thumbnails import ThumbnailCache

    return ThumbnailCache(codec=fake_codec)


@pytest.fixture
def app_client(output_dir: Path) -> TestClient:
    """Client for the full app configured with ``output_dir``."""
    from adminthumbs.api import create_app
    from adminthumbs.settings import Settings

    return TestClient(create_app(Settings(output_dir=output_dir)))


@pytest.fixture
def isolated_client(output_dir: Path) -> TestClient:
    """Client for the isolated thumbnail app."""
    from adminthumbs.api import create_thumbnail_test_app

    return TestClient(create_thumbnail_test_app(output_dir))


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: slow running tests")
