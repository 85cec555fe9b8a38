"""Screenshot: an immutable decoded PNG with its RGBA pixel buffer."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from visreg.errors import DecodeError

logger = logging.getLogger(__name__)

PIXEL_MODE = "RGBA"
CHANNELS = 4


@dataclass(frozen=True)
class RawBytes:
    """PNG-encoded bytes, e.g. read from disk or returned by a browser driver."""
    data: bytes


@dataclass(frozen=True)
class DecodedImage:
    """An image that has already been decoded by Pillow."""
    image: Image.Image


ScreenshotSource = RawBytes | DecodedImage | bytes | Image.Image


def _decode_png(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        if img.format != "PNG":
            raise DecodeError(f"Expected PNG data, got {img.format or 'unknown format'}")
        # Force the full pixel stream to decode so truncated files fail here
        img.load()
    except (OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not decode PNG ({len(data)} bytes): {e}") from e
    return img


def _to_8bit(img: Image.Image) -> Image.Image:
    """Scale 16-bit grayscale samples down to 8 bits; convert("RGBA") would clamp them."""
    if img.mode == "I" or img.mode.startswith("I;16"):
        return img.convert("I").point(lambda v: v / 256).convert("L")
    return img


class Screenshot:
    """A decoded screenshot. Pixels are always held as row-major RGBA bytes."""

    __slots__ = ("_image",)

    def __init__(self, source: ScreenshotSource):
        match source:
            case RawBytes(data=data):
                img = _decode_png(data)
            case DecodedImage(image=image):
                img = image
            case bytes() | bytearray():
                img = _decode_png(bytes(source))
            case Image.Image():
                img = source
            case _:
                raise TypeError(f"Unsupported screenshot source: {type(source).__name__}")

        # convert() always returns a new image, so callers can't mutate ours
        self._image = _to_8bit(img).convert(PIXEL_MODE)

    @classmethod
    def decode(cls, data: bytes) -> Screenshot:
        return cls(RawBytes(data))

    @classmethod
    def from_path(cls, path: str | Path) -> Screenshot:
        """Load a screenshot from a path."""
        data = Path(path).read_bytes()
        logger.debug("Read %d bytes from %s", len(data), path)
        return cls(RawBytes(data))

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def pixels(self) -> bytes:
        return self._image.tobytes()

    @property
    def image(self) -> Image.Image:
        """A copy of the underlying Pillow image."""
        return self._image.copy()

    def encode(self) -> bytes:
        buf = io.BytesIO()
        self._image.save(buf, format="PNG")
        return buf.getvalue()

    def save_to_path(self, path: str | Path) -> None:
        """Save the screenshot as a PNG, creating parent directories as needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.encode())
        logger.debug("Wrote %dx%d screenshot to %s", self.width, self.height, path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Screenshot):
            return NotImplemented
        return self.size == other.size and self.pixels == other.pixels

    __hash__ = None

    def __repr__(self) -> str:
        return f"Screenshot({self.width}x{self.height})"
