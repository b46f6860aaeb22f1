import random

import pytest

from dither_studio.errors import UnsupportedAlgorithm
from dither_studio.processing.buffer import PixelBuffer
from dither_studio.processing.dither import (
    AlgorithmId,
    apply,
    halftone_radius,
    kernel_weight,
)

DITHERS = [
    AlgorithmId.FLOYD_STEINBERG,
    AlgorithmId.ATKINSON,
    AlgorithmId.STUCKI,
    AlgorithmId.BURKES,
    AlgorithmId.SIERRA,
    AlgorithmId.BAYER_2X2,
    AlgorithmId.BAYER_4X4,
    AlgorithmId.BAYER_8X8,
    AlgorithmId.HALFTONE_DOTS,
    AlgorithmId.RANDOM,
]


def _photo(width=12, height=10):
    buffer = PixelBuffer(width, height)
    for y in range(height):
        for x in range(width):
            buffer.set_pixel(x, y, ((x * 23) % 256, (y * 29) % 256, (x * y * 7) % 256, 100 + x))
    return buffer


@pytest.mark.parametrize(
    "algorithm, expected",
    [
        (AlgorithmId.FLOYD_STEINBERG, 1.0),
        (AlgorithmId.ATKINSON, 0.75),
        (AlgorithmId.STUCKI, 1.0),
        (AlgorithmId.BURKES, 1.0),
        (AlgorithmId.SIERRA, 1.0),
    ],
)
def test_diffusion_kernel_weights(algorithm, expected):
    assert kernel_weight(algorithm) == pytest.approx(expected)


@pytest.mark.parametrize("algorithm", DITHERS)
def test_dithers_emit_binary_gray_and_keep_alpha(algorithm):
    source = _photo()
    before = source.copy()

    out = apply(source, algorithm, 128, rng=random.Random(1))

    assert source == before
    assert out.size == source.size
    assert out.data[3::4] == source.data[3::4]
    for i in range(0, len(out.data), 4):
        r, g, b = out.data[i:i + 3]
        assert r == g == b
        assert r in (0, 255)


def test_floyd_steinberg_mid_gray_top_left_is_white():
    source = PixelBuffer.blank(2, 2, (128, 128, 128, 255))

    out = apply(source, "floyd-steinberg", 128)

    assert out.get_pixel(0, 0) == (255, 255, 255, 255)


@pytest.mark.parametrize(
    "algorithm", [AlgorithmId.FLOYD_STEINBERG, AlgorithmId.ATKINSON, AlgorithmId.STUCKI]
)
def test_error_diffusion_keeps_solid_extremes(algorithm):
    white = PixelBuffer.blank(5, 5, (255, 255, 255, 255))
    black = PixelBuffer.blank(5, 5, (0, 0, 0, 255))

    assert apply(white, algorithm, 128) == white
    assert apply(black, algorithm, 128) == black


def test_bayer_2x2_tiles_matrix_on_uniform_gray():
    source = PixelBuffer.blank(4, 4, (128, 128, 128, 255))

    out = apply(source, AlgorithmId.BAYER_2X2, 128)

    rows = [[out.get_pixel(x, y)[0] for x in range(4)] for y in range(4)]
    assert rows == [
        [255, 0, 255, 0],
        [0, 255, 0, 255],
        [255, 0, 255, 0],
        [0, 255, 0, 255],
    ]


@pytest.mark.parametrize(
    "algorithm", [AlgorithmId.BAYER_2X2, AlgorithmId.BAYER_4X4, AlgorithmId.BAYER_8X8]
)
def test_bayer_is_deterministic(algorithm):
    source = _photo()

    assert apply(source, algorithm, 90) == apply(source, algorithm, 90)


def test_halftone_paints_dot_at_cell_centre():
    source = PixelBuffer.blank(8, 8, (0, 0, 0, 255))

    out = apply(source, AlgorithmId.HALFTONE_DOTS, 128)

    assert out.get_pixel(4, 4)[0] == 0
    assert out.get_pixel(0, 0)[0] == 255
    assert out.get_pixel(7, 7)[0] == 255


def test_halftone_radius_never_goes_negative():
    assert halftone_radius(0, 600) == 0
    assert halftone_radius(255, 0) > halftone_radius(0, 0)


def test_halftone_handles_partial_cells():
    out = apply(PixelBuffer.blank(11, 5, (90, 90, 90, 255)), AlgorithmId.HALFTONE_DOTS, 128)

    assert out.size == (11, 5)


def test_random_dither_extremes_and_distribution():
    white = PixelBuffer.blank(8, 8, (255, 255, 255, 255))
    black = PixelBuffer.blank(8, 8, (0, 0, 0, 255))
    assert apply(white, AlgorithmId.RANDOM, 0) == white
    assert apply(black, AlgorithmId.RANDOM, 255) == black

    gray = PixelBuffer.blank(64, 64, (128, 128, 128, 255))
    out = apply(gray, AlgorithmId.RANDOM, 128, rng=random.Random(11))
    white_share = sum(1 for value in out.data[0::4] if value == 255) / (64 * 64)
    assert 0.4 < white_share < 0.6


def test_random_dither_repeats_with_same_seed():
    source = _photo()

    first = apply(source, AlgorithmId.RANDOM, 128, rng=random.Random(7))
    second = apply(source, AlgorithmId.RANDOM, 128, rng=random.Random(7))

    assert first == second


def test_unknown_algorithm_is_rejected():
    with pytest.raises(UnsupportedAlgorithm):
        apply(_photo(), "sepia-dream", 128)
    with pytest.raises(ValueError):
        AlgorithmId.parse("nope")


def test_algorithm_ids_parse_case_insensitively():
    assert AlgorithmId.parse(" Floyd-Steinberg ") is AlgorithmId.FLOYD_STEINBERG
