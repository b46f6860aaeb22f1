from __future__ import annotations

import math
import random
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from ..errors import UnsupportedAlgorithm
from . import glitch
from .buffer import PixelBuffer


class AlgorithmId(str, Enum):
    FLOYD_STEINBERG = "floyd-steinberg"
    ATKINSON = "atkinson"
    STUCKI = "stucki"
    BURKES = "burkes"
    SIERRA = "sierra"
    BAYER_2X2 = "bayer-2x2"
    BAYER_4X4 = "bayer-4x4"
    BAYER_8X8 = "bayer-8x8"
    HALFTONE_DOTS = "halftone-dots"
    RANDOM = "random"
    DATAMOSH = "datamosh"
    PIXEL_SORT = "pixel-sort"
    SCANLINE_DISPLACEMENT = "scanline-displacement"
    RGB_SHIFT = "rgb-shift"
    BIT_CRUSH = "bit-crush"

    @classmethod
    def parse(cls, value: object) -> "AlgorithmId":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedAlgorithm(value) from None


# (dx, dy, weight) taps; only pixels not yet visited in a row-major scan.
Kernel = Tuple[Tuple[int, int, float], ...]

DIFFUSION_KERNELS: Dict[AlgorithmId, Kernel] = {
    AlgorithmId.FLOYD_STEINBERG: (
        (1, 0, 7 / 16),
        (-1, 1, 3 / 16),
        (0, 1, 5 / 16),
        (1, 1, 1 / 16),
    ),
    # Atkinson only pushes 6/8 of the error forward.
    AlgorithmId.ATKINSON: (
        (1, 0, 1 / 8),
        (2, 0, 1 / 8),
        (-1, 1, 1 / 8),
        (0, 1, 1 / 8),
        (1, 1, 1 / 8),
        (0, 2, 1 / 8),
    ),
    AlgorithmId.STUCKI: (
        (1, 0, 8 / 42),
        (2, 0, 4 / 42),
        (-2, 1, 2 / 42),
        (-1, 1, 4 / 42),
        (0, 1, 8 / 42),
        (1, 1, 4 / 42),
        (2, 1, 2 / 42),
        (-2, 2, 1 / 42),
        (-1, 2, 2 / 42),
        (0, 2, 4 / 42),
        (1, 2, 2 / 42),
        (2, 2, 1 / 42),
    ),
    AlgorithmId.BURKES: (
        (1, 0, 8 / 32),
        (2, 0, 4 / 32),
        (-2, 1, 2 / 32),
        (-1, 1, 4 / 32),
        (0, 1, 8 / 32),
        (1, 1, 4 / 32),
        (2, 1, 2 / 32),
    ),
    AlgorithmId.SIERRA: (
        (1, 0, 5 / 32),
        (2, 0, 3 / 32),
        (-2, 1, 2 / 32),
        (-1, 1, 4 / 32),
        (0, 1, 5 / 32),
        (1, 1, 4 / 32),
        (2, 1, 2 / 32),
        (-1, 2, 2 / 32),
        (0, 2, 3 / 32),
        (1, 2, 2 / 32),
    ),
}

BAYER_2X2 = (
    (0, 2),
    (3, 1),
)

BAYER_4X4 = (
    (0, 8, 2, 10),
    (12, 4, 14, 6),
    (3, 11, 1, 9),
    (15, 7, 13, 5),
)

BAYER_8X8 = (
    (0, 32, 8, 40, 2, 34, 10, 42),
    (48, 16, 56, 24, 50, 18, 58, 26),
    (12, 44, 4, 36, 14, 46, 6, 38),
    (60, 28, 52, 20, 62, 30, 54, 22),
    (3, 35, 11, 43, 1, 33, 9, 41),
    (51, 19, 59, 27, 49, 17, 57, 25),
    (15, 47, 7, 39, 13, 45, 5, 37),
    (63, 31, 55, 23, 61, 29, 53, 21),
)

BAYER_MATRICES = {
    AlgorithmId.BAYER_2X2: BAYER_2X2,
    AlgorithmId.BAYER_4X4: BAYER_4X4,
    AlgorithmId.BAYER_8X8: BAYER_8X8,
}

HALFTONE_CELL = 8


def kernel_weight(algorithm: AlgorithmId) -> float:
    """Fraction of the quantisation error a diffusion kernel passes on."""
    return sum(weight for _, _, weight in DIFFUSION_KERNELS[algorithm])


def error_diffusion(buffer: PixelBuffer, threshold: float, kernel: Kernel) -> PixelBuffer:
    out = buffer.copy()
    width, height = out.size
    data = out.data
    for y in range(height):
        for x in range(width):
            i = (y * width + x) * 4
            gray = out.luma_at(i)
            new = 255 if gray >= threshold else 0
            error = gray - new
            data[i] = data[i + 1] = data[i + 2] = new
            if not error:
                continue
            for dx, dy, weight in kernel:
                nx = x + dx
                ny = y + dy
                if nx < 0 or nx >= width or ny >= height:
                    continue
                j = (ny * width + nx) * 4
                share = error * weight
                out.set_rgb(j, data[j] + share, data[j + 1] + share, data[j + 2] + share)
    return out


def ordered_dither(buffer: PixelBuffer, threshold: float, matrix: Sequence[Sequence[int]]) -> PixelBuffer:
    out = buffer.copy()
    width, height = out.size
    data = out.data
    size = len(matrix)
    max_value = size * size - 1
    offsets = [[threshold + (value / max_value * 255 - 128) for value in row] for row in matrix]
    for y in range(height):
        row = offsets[y % size]
        for x in range(width):
            i = (y * width + x) * 4
            new = 255 if out.luma_at(i) > row[x % size] else 0
            data[i] = data[i + 1] = data[i + 2] = new
    return out


def halftone_radius(mean_luma: float, threshold: float, cell: int = HALFTONE_CELL) -> float:
    coverage = mean_luma / 255 - threshold / 255 + 1
    # A negative coverage term paints the same as a zero radius.
    return math.sqrt(max(0.0, coverage) * (cell * cell / 4) / math.pi)


def halftone_dots(buffer: PixelBuffer, threshold: float) -> PixelBuffer:
    out = buffer.copy()
    width, height = out.size
    data = out.data
    cell = HALFTONE_CELL
    center = cell / 2
    for top in range(0, height, cell):
        bottom = min(top + cell, height)
        for left in range(0, width, cell):
            right = min(left + cell, width)
            total = 0.0
            for y in range(top, bottom):
                for x in range(left, right):
                    total += out.luma_at((y * width + x) * 4)
            mean = total / ((bottom - top) * (right - left))
            radius = halftone_radius(mean, threshold)
            for y in range(top, bottom):
                for x in range(left, right):
                    distance = math.hypot(x - left - center, y - top - center)
                    value = 0 if distance <= radius else 255
                    i = (y * width + x) * 4
                    data[i] = data[i + 1] = data[i + 2] = value
    return out


def random_dither(buffer: PixelBuffer, threshold: float, rng: random.Random) -> PixelBuffer:
    out = buffer.copy()
    data = out.data
    uniform = rng.uniform
    for i in range(0, len(data), 4):
        new = 255 if out.luma_at(i) > threshold + uniform(-50, 50) else 0
        data[i] = data[i + 1] = data[i + 2] = new
    return out


def apply(
    buffer: PixelBuffer,
    algorithm: AlgorithmId | str,
    threshold: float = 128,
    aux: float = 0,
    rng: Optional[random.Random] = None,
) -> PixelBuffer:
    """Run one dithering or glitch transform and return a new buffer.

    ``aux`` carries the algorithm-specific parameter: the noise level for
    datamosh, scanline-displacement and rgb-shift, the posterize level for
    bit-crush. The input buffer is left untouched.
    """

    algorithm_id = AlgorithmId.parse(algorithm)
    rng = rng or random.Random()

    if algorithm_id in DIFFUSION_KERNELS:
        return error_diffusion(buffer, threshold, DIFFUSION_KERNELS[algorithm_id])
    if algorithm_id in BAYER_MATRICES:
        return ordered_dither(buffer, threshold, BAYER_MATRICES[algorithm_id])
    if algorithm_id is AlgorithmId.HALFTONE_DOTS:
        return halftone_dots(buffer, threshold)
    if algorithm_id is AlgorithmId.RANDOM:
        return random_dither(buffer, threshold, rng)
    if algorithm_id is AlgorithmId.DATAMOSH:
        return glitch.datamosh(buffer, aux, rng)
    if algorithm_id is AlgorithmId.PIXEL_SORT:
        # Threshold doubles as the per-row activation probability here.
        return glitch.pixel_sort(buffer, threshold, rng)
    if algorithm_id is AlgorithmId.SCANLINE_DISPLACEMENT:
        return glitch.scanline_displacement(buffer, aux, rng)
    if algorithm_id is AlgorithmId.RGB_SHIFT:
        return glitch.rgb_shift(buffer, aux)
    if algorithm_id is AlgorithmId.BIT_CRUSH:
        return glitch.bit_crush(buffer, int(aux))
    raise UnsupportedAlgorithm(algorithm)
