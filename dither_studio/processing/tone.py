from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .buffer import PixelBuffer, clamp_channel, luma
from .params import bounded, bounded_int, read


@dataclass(frozen=True)
class ToneSettings:
    brightness: float = 100.0
    contrast: float = 100.0
    saturation: float = 100.0
    posterize: int = 256
    noise: float = 0.0
    blur: float = 0.0

    def __post_init__(self) -> None:
        # Clamped on construction, so directly built settings are as safe as parsed ones.
        object.__setattr__(self, "brightness", bounded("brightness", self.brightness, 0, 200))
        object.__setattr__(self, "contrast", bounded("contrast", self.contrast, 0, 200))
        object.__setattr__(self, "saturation", bounded("saturation", self.saturation, 0, 200))
        object.__setattr__(self, "posterize", bounded_int("posterize", self.posterize, 2, 256))
        object.__setattr__(self, "noise", bounded("noiseLevel", self.noise, 0, 100))
        object.__setattr__(self, "blur", bounded("blur", self.blur, 0, 10))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ToneSettings":
        """Build settings from a layer ``settings`` mapping.

        Older layer shapes omit saturation, posterize and blur; those fall back
        to their neutral values. ``noiseLevel`` is the key the layer stack uses
        for noise, ``noise`` is accepted as well.
        """

        noise = payload.get("noiseLevel", payload.get("noise"))
        return cls(
            brightness=read(payload, "brightness", 100),
            contrast=read(payload, "contrast", 100),
            saturation=read(payload, "saturation", 100),
            posterize=read(payload, "posterize", 256),
            noise=0 if noise is None else noise,
            blur=read(payload, "blur", 0),
        )

    def to_dict(self) -> dict:
        return {
            "brightness": self.brightness,
            "contrast": self.contrast,
            "saturation": self.saturation,
            "posterize": self.posterize,
            "noiseLevel": self.noise,
            "blur": self.blur,
        }


NEUTRAL = ToneSettings()


def box_blur(buffer: PixelBuffer, radius: float) -> None:
    if radius <= 0:
        return
    reach = math.ceil(radius)
    width, height = buffer.size
    data = buffer.data
    stride = width + 1

    # Summed-area tables per colour channel, one row/column of zero padding.
    tables = []
    for channel in range(3):
        table = [0] * (stride * (height + 1))
        for y in range(height):
            row_sum = 0
            src = y * width * 4 + channel
            above = y * stride
            here = (y + 1) * stride
            for x in range(width):
                row_sum += data[src + x * 4]
                table[here + x + 1] = table[above + x + 1] + row_sum
        tables.append(table)

    for y in range(height):
        y0 = max(0, y - reach)
        y1 = min(height - 1, y + reach) + 1
        for x in range(width):
            x0 = max(0, x - reach)
            x1 = min(width - 1, x + reach) + 1
            count = (x1 - x0) * (y1 - y0)
            i = (y * width + x) * 4
            for channel, table in enumerate(tables):
                total = (
                    table[y1 * stride + x1]
                    - table[y0 * stride + x1]
                    - table[y1 * stride + x0]
                    + table[y0 * stride + x0]
                )
                data[i + channel] = clamp_channel(total / count)


def apply_saturation(buffer: PixelBuffer, saturation: float) -> None:
    if saturation == 100:
        return
    scale = saturation / 100.0
    data = buffer.data
    for i in range(0, len(data), 4):
        r, g, b = data[i], data[i + 1], data[i + 2]
        y = luma(r, g, b)
        buffer.set_rgb(i, y + (r - y) * scale, y + (g - y) * scale, y + (b - y) * scale)


def contrast_factor(contrast: float) -> float:
    """Photographic contrast curve for a 0-200 percent knob (100 is neutral)."""
    c = (contrast - 100.0) * 2.55
    return (259.0 * (c + 255.0)) / (255.0 * (259.0 - c))


def apply_contrast(buffer: PixelBuffer, contrast: float) -> None:
    if contrast == 100:
        return
    factor = contrast_factor(contrast)
    buffer.map_rgb([clamp_channel(factor * (value - 128) + 128) for value in range(256)])


def apply_brightness(buffer: PixelBuffer, brightness: float) -> None:
    if brightness == 100:
        return
    scale = brightness / 100.0
    buffer.map_rgb([clamp_channel(value * scale) for value in range(256)])


def apply_posterize(buffer: PixelBuffer, levels: int) -> None:
    if levels >= 256:
        return
    step = 255.0 / (levels - 1)
    buffer.map_rgb([clamp_channel(math.floor(value / step + 0.5) * step) for value in range(256)])


def apply_noise(buffer: PixelBuffer, noise: float, rng: random.Random) -> None:
    if noise <= 0:
        return
    amplitude = noise * 2.55
    uniform = rng.uniform
    data = buffer.data
    for i in range(0, len(data), 4):
        buffer.set_rgb(
            i,
            data[i] + uniform(-amplitude, amplitude),
            data[i + 1] + uniform(-amplitude, amplitude),
            data[i + 2] + uniform(-amplitude, amplitude),
        )


def adjust(buffer: PixelBuffer, settings: ToneSettings, rng: Optional[random.Random] = None) -> None:
    """Apply the tone stages to ``buffer`` in place.

    Order is blur, saturation, contrast, brightness, posterize, noise. Every
    stage writes back clamped 8-bit values, so the next one always reads a
    valid range. Alpha is never touched.
    """

    box_blur(buffer, settings.blur)
    apply_saturation(buffer, settings.saturation)
    apply_contrast(buffer, settings.contrast)
    apply_brightness(buffer, settings.brightness)
    apply_posterize(buffer, settings.posterize)
    if settings.noise > 0:
        apply_noise(buffer, settings.noise, rng or random.Random())
