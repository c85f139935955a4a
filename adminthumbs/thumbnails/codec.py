"""Image codecs used to render thumbnails.

The cache only talks to :class:`ImageCodec`; the implementation is chosen by
whoever constructs the cache. :class:`PillowCodec` does the real work,
:class:`FakeCodec` is a deterministic stand-in for tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path

from PIL import ExifTags, Image, ImageOps


class ImageCodec(ABC):
    """Decode, resize and encode primitives needed by the thumbnail cache."""

    @abstractmethod
    def read_size(self, path: Path) -> tuple[int, int]:
        """Return the native ``(width, height)`` of an image file."""

    @abstractmethod
    def render_jpeg(
        self,
        path: Path,
        size: tuple[int, int],
        quality: int,
        progressive: bool = True,
    ) -> bytes:
        """Resize the image at ``path`` to ``size`` and encode it as JPEG."""


class PillowCodec(ImageCodec):
    """Codec backed by Pillow."""

    def __init__(self, background_color: str = "#ffffff") -> None:
        self.background = self._hex_to_rgb(background_color)

    def read_size(self, path: Path) -> tuple[int, int]:
        # Only the header is parsed; orientations 5-8 swap the axes
        with Image.open(path) as image:
            width, height = image.size
            if image.getexif().get(ExifTags.Base.Orientation, 1) in (5, 6, 7, 8):
                return height, width
            return width, height

    def render_jpeg(
        self,
        path: Path,
        size: tuple[int, int],
        quality: int,
        progressive: bool = True,
    ) -> bytes:
        with Image.open(path) as image:
            image = ImageOps.exif_transpose(image)
            # Palette and bilevel images only resize with NEAREST, so flatten first
            image = self._flatten(image)
            if (image.width, image.height) != size:
                image = image.resize(size, Image.Resampling.LANCZOS)

            output = BytesIO()
            image.save(
                output,
                format="JPEG",
                quality=quality,
                optimize=True,
                progressive=progressive,
            )
            return output.getvalue()

    def _flatten(self, image: Image.Image) -> Image.Image:
        """Composite transparent images onto the background colour."""
        if image.mode == "P" and "transparency" in image.info:
            image = image.convert("RGBA")
        if image.mode in ("RGBA", "LA", "PA"):
            image = image.convert("RGBA")
            background = Image.new("RGB", image.size, self.background)
            background.paste(image, (0, 0), image)
            return background
        if image.mode != "RGB":
            image = image.convert("RGB")
        return image

    @staticmethod
    def _hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
        """Convert hex color to RGB tuple."""
        hex_color = hex_color.lstrip("#")
        return tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


# SOI marker, filler, EOI marker
FAKE_JPEG = b"\xff\xd8\xff\xe0" + bytes(120) + b"\xff\xd9"


class FakeCodec(ImageCodec):
    """Deterministic codec that never touches image content.

    Reports a fixed native size and returns the same JPEG-framed payload for
    every render. Call counters let tests observe whether work happened.
    """

    def __init__(
        self,
        native_size: tuple[int, int] = (120, 80),
        payload: bytes = FAKE_JPEG,
        fail: bool = False,
    ) -> None:
        self.native_size = native_size
        self.payload = payload
        self.fail = fail
        self.size_calls = 0
        self.render_calls = 0
        self.rendered_sizes: list[tuple[int, int]] = []

    def read_size(self, path: Path) -> tuple[int, int]:
        self.size_calls += 1
        if self.fail:
            raise OSError(f"cannot identify image file {str(path)!r}")
        return self.native_size

    def render_jpeg(
        self,
        path: Path,
        size: tuple[int, int],
        quality: int,
        progressive: bool = True,
    ) -> bytes:
        self.render_calls += 1
        if self.fail:
            raise OSError(f"cannot identify image file {str(path)!r}")
        self.rendered_sizes.append(size)
        return self.payload
