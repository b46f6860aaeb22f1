import pytest
from PIL import Image

from dither_studio.errors import InvalidDimensions
from dither_studio.processing.buffer import PixelBuffer, clamp_channel, luma


def test_buffer_rejects_empty_and_negative_dimensions():
    with pytest.raises(InvalidDimensions):
        PixelBuffer(0, 4)
    with pytest.raises(InvalidDimensions):
        PixelBuffer(3, -1)


def test_buffer_rejects_mismatched_sample_count():
    with pytest.raises(InvalidDimensions):
        PixelBuffer(2, 2, [0] * 15)


def test_writes_clamp_instead_of_wrapping():
    buffer = PixelBuffer(1, 1)

    buffer.set_pixel(0, 0, (300, -5, 12.6, 255))

    assert buffer.get_pixel(0, 0) == (255, 0, 13, 255)
    assert clamp_channel(256) == 255
    assert clamp_channel(-0.4) == 0


def test_image_conversion_keeps_size_and_adds_alpha():
    img = Image.new("RGB", (3, 2), color=(10, 20, 30))

    buffer = PixelBuffer.from_image(img)

    assert buffer.size == (3, 2)
    assert len(buffer.data) == 3 * 2 * 4
    assert buffer.get_pixel(2, 1) == (10, 20, 30, 255)
    out = buffer.to_image()
    assert out.mode == "RGBA"
    assert out.getpixel((0, 0)) == (10, 20, 30, 255)


def test_copy_is_independent():
    original = PixelBuffer.blank(2, 2, (50, 60, 70, 255))
    clone = original.copy()

    clone.set_pixel(0, 0, (0, 0, 0, 0))

    assert original.get_pixel(0, 0) == (50, 60, 70, 255)
    assert clone != original


def test_luma_is_exact_for_neutral_gray():
    assert luma(128, 128, 128) == 128.0
    assert luma(255, 0, 0) == pytest.approx(76.245)


def test_map_rgb_remaps_colour_channels_and_keeps_alpha():
    buffer = PixelBuffer(2, 1, [0, 100, 255, 0, 10, 20, 30, 200])

    buffer.map_rgb([255 - value for value in range(256)])

    assert buffer.get_pixel(0, 0) == (255, 155, 0, 0)
    assert buffer.get_pixel(1, 0) == (245, 235, 225, 200)
    assert isinstance(buffer.data, bytearray)
