import pytest

from tifgen.texture.formats import PixelFormat, bytes_per_pixel
from tifgen.texture.pixels import (
    pack,
    pack_rows,
    pack_value,
    padded_width,
    uncompressed_size,
    unpack,
)

UNCOMPRESSED = [
    PixelFormat.ARGB8888,
    PixelFormat.RGB565,
    PixelFormat.ARGB4444,
    PixelFormat.L8,
    PixelFormat.LA88,
]


@pytest.mark.parametrize("width", list(range(1, 70)) + [255, 256, 257, 1000])
def test_padded_width_properties(width):
    pw = padded_width(width)
    assert pw % 16 == 0
    assert pw >= width
    assert (pw == width) == (width % 16 == 0)
    assert pw - width < 16


def test_argb8888_is_little_endian_argb():
    assert pack_value(PixelFormat.ARGB8888, (0x11, 0x22, 0x33, 0x44)) == 0x44112233
    assert pack(PixelFormat.ARGB8888, (0x11, 0x22, 0x33, 0x44)) == b"\x33\x22\x11\x44"


def test_rgb565_discards_alpha():
    assert pack_value(PixelFormat.RGB565, (255, 255, 255, 0)) == 0xFFFF
    assert pack_value(PixelFormat.RGB565, (0x12, 0x34, 0x56, 255)) == 0x11AA
    assert pack(PixelFormat.RGB565, (0x12, 0x34, 0x56, 0)) == b"\xaa\x11"


def test_argb4444():
    assert pack_value(PixelFormat.ARGB4444, (0x12, 0x34, 0x56, 0x78)) == 0x7135
    assert pack(PixelFormat.ARGB4444, (0x12, 0x34, 0x56, 0x78)) == b"\x35\x71"


def test_luminance_formats_use_first_and_second_channel():
    assert pack(PixelFormat.L8, (77, 128)) == b"\x4d"
    assert pack_value(PixelFormat.LA88, (77, 128)) == 0x4D80
    assert pack(PixelFormat.LA88, (77, 128)) == b"\x80\x4d"


SAMPLES = [(0, 0, 0, 0), (255, 255, 255, 255), (0x12, 0x34, 0x56, 0x78), (7, 130, 249, 31)]


@pytest.mark.parametrize("sample", SAMPLES)
def test_pack_unpack_truncates_deterministically(sample):
    r, g, b, a = sample
    assert unpack(PixelFormat.ARGB8888, pack_value(PixelFormat.ARGB8888, sample)) == sample
    assert unpack(PixelFormat.RGB565, pack_value(PixelFormat.RGB565, sample)) == (
        r & 0xF8,
        g & 0xFC,
        b & 0xF8,
    )
    assert unpack(PixelFormat.ARGB4444, pack_value(PixelFormat.ARGB4444, sample)) == (
        r & 0xF0,
        g & 0xF0,
        b & 0xF0,
        a & 0xF0,
    )
    assert unpack(PixelFormat.L8, pack_value(PixelFormat.L8, (r, a))) == (r,)
    assert unpack(PixelFormat.LA88, pack_value(PixelFormat.LA88, (r, a))) == (r, a)


def test_pack_rows_pads_each_row_with_zero_pixels():
    width, height = 3, 2
    samples = [(255, 255, 255, 255)] * (width * height)
    data = pack_rows(PixelFormat.RGB565, samples, width, height)
    assert len(data) == uncompressed_size(PixelFormat.RGB565, width, height) == 2 * 16 * 2
    row = 16 * 2
    for y in range(height):
        assert data[y * row : y * row + 6] == b"\xff" * 6
        assert data[y * row + 6 : (y + 1) * row] == b"\x00" * (row - 6)


def test_pack_rows_row_major_order():
    # 2x2 with distinct luminance values; width padded to 16
    samples = [(1, 0), (2, 0), (3, 0), (4, 0)]
    data = pack_rows(PixelFormat.L8, samples, 2, 2)
    assert data[0:2] == b"\x01\x02"
    assert data[16:18] == b"\x03\x04"


@pytest.mark.parametrize("fmt", UNCOMPRESSED)
def test_no_padding_when_width_is_multiple_of_16(fmt):
    channels = 2 if fmt.source_mode == "LA" else 4
    samples = [(9,) * channels] * (32 * 3)
    data = pack_rows(fmt, samples, 32, 3)
    assert len(data) == 32 * 3 * bytes_per_pixel(fmt)
