import struct

import pytest
from PIL import Image

from tifgen.api import encode_texture
from tifgen.packing.errors import InspectError
from tifgen.packing.inspector import inspect_container, validate_container
from tifgen.texture.image_source import from_pil


def _tif(fmt="dxt1", variant="ma2", size=(16, 16)):
    return encode_texture(from_pil(Image.new("RGBA", size, (1, 2, 3, 4))), fmt, variant)


def test_inspect_reports_header_fields():
    info = inspect_container(_tif())
    assert info["header"]["magic_ok"]
    assert info["header"]["padding_zero"]
    assert info["pic"]["tag_ok"] and info["pic"]["reserved_zero"]
    assert info["fields"]["flgs"] == 0x80000100
    assert info["fields"]["frms"] == 1 and info["fields"]["dpth"] == 1
    assert [c["tag"] for c in info["chunks"]] == [
        "ver ",
        "flgs",
        "wdth",
        "hgt ",
        "mips",
        "size",
        "frms",
        "dpth",
        "bits",
    ]
    assert validate_container(info) == []


def test_truncated_container_is_flagged():
    data = _tif()[:-5]
    issues = validate_container(inspect_container(data))
    assert any("total_length" in i for i in issues)
    assert any("payload holds" in i for i in issues)


def test_tampered_size_field_is_flagged():
    data = bytearray(_tif(fmt="l8", variant="ma1"))
    struct.pack_into("<I", data, 105 + 8, 999)
    issues = validate_container(inspect_container(bytes(data)))
    assert any("bits length" in i for i in issues)


def test_garbage_raises_inspect_error():
    with pytest.raises(InspectError):
        inspect_container(b"\x00" * 10)
