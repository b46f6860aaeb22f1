"""Glitch transforms.

These are not dithers: they move or re-quantise colour instead of reducing
it to black and white. Each takes an ``intensity`` on the 0-100 noise scale
unless noted otherwise. Alpha always stays where it was.
"""

from __future__ import annotations

import math
import random

from .buffer import PixelBuffer, clamp_channel, luma

DATAMOSH_BLOCK = 8


def datamosh(buffer: PixelBuffer, intensity: float, rng: random.Random) -> PixelBuffer:
    out = buffer.copy()
    if intensity <= 0:
        return out
    width, height = out.size
    data = out.data
    block_chance = min(1.0, intensity / 100)
    for top in range(0, height, DATAMOSH_BLOCK):
        bottom = min(top + DATAMOSH_BLOCK, height)
        for left in range(0, width, DATAMOSH_BLOCK):
            right = min(left + DATAMOSH_BLOCK, width)
            if rng.random() >= block_chance:
                continue
            offsets = [(y * width + x) * 4 for y in range(top, bottom) for x in range(left, right)]
            count = len(offsets)
            mean = [sum(data[i + c] for i in offsets) / count for c in range(3)]
            for i in offsets:
                out.set_rgb(i, *mean)

    source = bytes(data)
    pixel_chance = min(1.0, intensity / 400)
    total = width * height
    for i in range(0, len(data), 4):
        if rng.random() < pixel_chance:
            j = rng.randrange(total) * 4
            data[i:i + 3] = source[j:j + 3]
    return out


def pixel_sort(buffer: PixelBuffer, threshold: float, rng: random.Random) -> PixelBuffer:
    """Sort whole rows by luma; ``threshold / 255`` is the chance a row is sorted."""
    out = buffer.copy()
    width, height = out.size
    data = out.data
    chance = min(1.0, max(0.0, threshold / 255))
    for y in range(height):
        if rng.random() >= chance:
            continue
        start = y * width * 4
        colours = [tuple(data[start + x * 4:start + x * 4 + 3]) for x in range(width)]
        colours.sort(key=lambda rgb: luma(*rgb))
        for x, rgb in enumerate(colours):
            i = start + x * 4
            data[i:i + 3] = bytes(rgb)
    return out


def scanline_displacement(buffer: PixelBuffer, intensity: float, rng: random.Random) -> PixelBuffer:
    out = buffer.copy()
    if intensity <= 0:
        return out
    width, height = out.size
    data = out.data
    source = bytes(data)
    chance = min(1.0, intensity / 100)
    reach = max(1, round(width * intensity / 200))
    for y in range(height):
        if rng.random() >= chance:
            continue
        shift = rng.randint(-reach, reach)
        if shift % width == 0:
            continue
        start = y * width * 4
        for x in range(width):
            i = start + x * 4
            j = start + ((x - shift) % width) * 4
            data[i:i + 3] = source[j:j + 3]
    return out


def rgb_shift(buffer: PixelBuffer, intensity: float) -> PixelBuffer:
    """Red moves right, blue moves left, green stays put."""
    out = buffer.copy()
    width, height = out.size
    offset = math.ceil(width * max(0.0, intensity) / 1000)
    if offset == 0:
        return out
    data = out.data
    source = buffer.data
    last = width - 1
    for y in range(height):
        start = y * width * 4
        for x in range(width):
            i = start + x * 4
            data[i] = source[start + max(0, x - offset) * 4]
            data[i + 2] = source[start + min(last, x + offset) * 4 + 2]
    return out


def bit_crush(buffer: PixelBuffer, levels: int) -> PixelBuffer:
    out = buffer.copy()
    levels = min(256, max(2, levels))
    if levels >= 256:
        return out
    steps = levels - 1
    lut = [clamp_channel(round(value * steps / 255) * 255 / steps) for value in range(256)]
    out.map_rgb(lut)
    return out
