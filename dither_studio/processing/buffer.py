from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

from PIL import Image

from ..errors import InvalidDimensions

RGBA = Tuple[int, int, int, int]


def clamp_channel(value: float) -> int:
    """Round half up and clamp to the 8-bit range."""
    if value <= 0:
        return 0
    if value >= 255:
        return 255
    return int(math.floor(value + 0.5))


def luma(r: float, g: float, b: float) -> float:
    # Integer weights keep equal channels exact (128, 128, 128 -> 128.0).
    return (299 * r + 587 * g + 114 * b) / 1000.0


class PixelBuffer:
    """Width x height RGBA8 raster stored as one contiguous ``bytearray``."""

    __slots__ = ("width", "height", "data")

    def __init__(self, width: int, height: int, data: Iterable[int] | None = None) -> None:
        if width < 1 or height < 1:
            raise InvalidDimensions(f"Buffer must be at least 1x1, got {width}x{height}")
        expected = width * height * 4
        if data is None:
            samples = bytearray(expected)
        else:
            samples = bytearray(clamp_channel(value) for value in data)
        if len(samples) != expected:
            raise InvalidDimensions(
                f"Expected {expected} samples for {width}x{height}, got {len(samples)}"
            )
        self.width = width
        self.height = height
        self.data = samples

    @classmethod
    def blank(cls, width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> "PixelBuffer":
        buffer = cls(width, height)
        buffer.data[:] = bytes(clamp_channel(c) for c in color) * (width * height)
        return buffer

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        rgba = img.convert("RGBA")
        width, height = rgba.size
        buffer = cls(width, height)
        buffer.data[:] = rgba.tobytes()
        return buffer

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    def copy(self) -> "PixelBuffer":
        clone = PixelBuffer.__new__(PixelBuffer)
        clone.width = self.width
        clone.height = self.height
        clone.data = bytearray(self.data)
        return clone

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def index(self, x: int, y: int) -> int:
        return (y * self.width + x) * 4

    def get_pixel(self, x: int, y: int) -> RGBA:
        i = self.index(x, y)
        d = self.data
        return d[i], d[i + 1], d[i + 2], d[i + 3]

    def set_pixel(self, x: int, y: int, rgba: Iterable[float]) -> None:
        i = self.index(x, y)
        self.data[i:i + 4] = bytes(clamp_channel(c) for c in rgba)

    def set_rgb(self, i: int, r: float, g: float, b: float) -> None:
        """Write the colour channels at sample offset ``i``, leaving alpha alone."""
        d = self.data
        d[i] = clamp_channel(r)
        d[i + 1] = clamp_channel(g)
        d[i + 2] = clamp_channel(b)

    def map_rgb(self, lut: Sequence[int]) -> None:
        """Remap R, G and B through a 256-entry table in place; alpha is kept."""
        mapped = self.to_image().point(list(lut) * 3 + list(range(256)))
        self.data[:] = mapped.tobytes()

    def luma_at(self, i: int) -> float:
        d = self.data
        return luma(d[i], d[i + 1], d[i + 2])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and self.data == other.data

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height})"
