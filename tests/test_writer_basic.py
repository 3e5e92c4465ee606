import io
import struct

import pytest
from PIL import Image

from tifgen.packing.errors import LayoutError, WriteError
from tifgen.packing.planner import TextureDescriptor, compute_layout
from tifgen.packing.writer import encode_levels, pack_header, write_container
from tifgen.texture.formats import EngineVariant, PixelFormat
from tifgen.texture.image_source import from_pil


def _image(width, height, color=(77, 77, 77, 255)):
    return from_pil(Image.new("RGBA", (width, height), color))


def _encode(image, fmt, variant):
    layout = compute_layout(
        TextureDescriptor(image.width, image.height, fmt, variant)
    )
    buf = io.BytesIO()
    written = write_container(buf, layout, encode_levels(layout, image))
    data = buf.getvalue()
    assert written == len(data) == layout.total_length
    return layout, data


def test_l8_16x16_variant_a_byte_layout():
    _layout, data = _encode(_image(16, 16), PixelFormat.L8, EngineVariant.VARIANT_A)
    assert len(data) == 381
    assert data[0:4] == b"\x00\x00\x01\x00"  # 65536
    assert data[4:8] == b"MGIc"
    assert struct.unpack_from("<II", data, 8) == (381, 1)
    assert data[16:32] == b"\x00" * 16
    assert data[32:36] == b"PIC "
    assert data[36:40] == b"\x00" * 4
    assert struct.unpack_from("<II", data, 40) == (349, 7)
    assert data[48:57] == b"ver " + struct.pack("<I", 9) + b"\x02"
    expected = [
        (b"flgs", 0x005),
        (b"wdth", 16),
        (b"hgt ", 16),
        (b"mips", 1),
        (b"size", 256),
    ]
    offset = 57
    for tag, value in expected:
        assert data[offset : offset + 12] == tag + struct.pack("<II", 12, value)
        offset += 12
    assert data[offset : offset + 8] == b"bits" + struct.pack("<I", 264)
    assert data[offset + 8 :] == bytes([77]) * 256


def test_variant_b_emits_frame_and_depth_chunks():
    _layout, data = _encode(_image(16, 16), PixelFormat.L8, EngineVariant.VARIANT_B)
    assert struct.unpack_from("<II", data, 40) == (373, 9)
    assert data[56] == 4
    assert struct.unpack_from("<4sII", data, 57) == (b"flgs", 12, 0x80000005)
    assert data[117:129] == b"frms" + struct.pack("<II", 12, 1)
    assert data[129:141] == b"dpth" + struct.pack("<II", 12, 1)
    assert data[141:149] == b"bits" + struct.pack("<I", 264)
    assert len(data) == 405


def test_la88_payload_has_padded_rows():
    img = _image(3, 2, (77, 77, 77, 128))
    layout, data = _encode(img, PixelFormat.LA88, EngineVariant.VARIANT_A)
    payload = data[layout.payload_offset :]
    assert len(payload) == 2 * 16 * 2
    assert payload[0:6] == b"\x80\x4d" * 3
    assert payload[6:32] == b"\x00" * 26
    assert payload[32:38] == b"\x80\x4d" * 3


def test_dxt1_levels_written_largest_first():
    layout, data = _encode(
        _image(64, 64, (255, 0, 0, 255)), PixelFormat.DXT1, EngineVariant.VARIANT_B
    )
    assert layout.mip_count == 5
    payload = data[layout.payload_offset :]
    assert len(payload) == 2728
    assert struct.unpack_from("<4sII", data, 105) == (b"size", 12, 2728)
    red_block = struct.pack("<HHI", 0xF800, 0xF800, 0)
    assert payload == red_block * (2728 // 8)


class _ShortSink:
    def write(self, data):
        return max(0, len(data) - 1)


class _FailingSink:
    def write(self, data):
        raise OSError("disk full")


@pytest.mark.parametrize("sink", [_ShortSink(), _FailingSink()])
def test_write_failures_abort(sink):
    img = _image(16, 16)
    layout = compute_layout(
        TextureDescriptor(16, 16, PixelFormat.L8, EngineVariant.VARIANT_A)
    )
    with pytest.raises(WriteError) as exc:
        write_container(sink, layout, encode_levels(layout, img))
    assert exc.value.code == "E_WRITE_IO"


def test_payload_size_mismatch_is_layout_error():
    layout = compute_layout(
        TextureDescriptor(16, 16, PixelFormat.L8, EngineVariant.VARIANT_A)
    )
    with pytest.raises(LayoutError):
        write_container(io.BytesIO(), layout, [b"\x00" * 255])
    with pytest.raises(LayoutError):
        write_container(io.BytesIO(), layout, [])


def test_header_length_matches_payload_offset():
    layout = compute_layout(
        TextureDescriptor(64, 64, PixelFormat.DXT3, EngineVariant.VARIANT_B)
    )
    assert len(pack_header(layout)) == layout.payload_offset


def test_image_size_must_match_layout():
    layout = compute_layout(
        TextureDescriptor(16, 16, PixelFormat.L8, EngineVariant.VARIANT_A)
    )
    with pytest.raises(LayoutError):
        list(encode_levels(layout, _image(8, 8)))
