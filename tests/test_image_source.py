import pytest
from PIL import Image

from tifgen.packing.errors import SourceImageError
from tifgen.texture.image_source import decode, from_pil


def test_samples_rgba_and_la():
    img = Image.new("RGBA", (2, 1))
    img.putpixel((0, 0), (10, 20, 30, 40))
    img.putpixel((1, 0), (90, 90, 90, 200))
    src = from_pil(img)
    assert list(src.samples()) == [(10, 20, 30, 40), (90, 90, 90, 200)]
    la = list(src.samples("LA"))
    assert la[1] == (90, 200)
    assert la[0][1] == 40
    assert src.sample(1, 0) == (90, 90, 90, 200)


def test_from_pil_converts_to_rgba():
    src = from_pil(Image.new("RGB", (4, 4), (1, 2, 3)))
    assert src.image.mode == "RGBA"
    assert src.sample(0, 0) == (1, 2, 3, 255)


def test_rgba_level_box_filters_to_size():
    src = from_pil(Image.new("RGBA", (8, 4), (5, 6, 7, 8)))
    assert len(src.rgba_level(8, 4)) == 8 * 4 * 4
    level = src.rgba_level(4, 2)
    assert level == bytes([5, 6, 7, 8]) * 8


def test_decode_survives_closed_file(tmp_path):
    path = tmp_path / "s.png"
    Image.new("RGBA", (3, 3), (1, 1, 1, 1)).save(path)
    src = decode(path)
    assert (src.width, src.height) == (3, 3)
    assert src.sample(2, 2) == (1, 1, 1, 1)


def test_rgba_level_keeps_colour_straight():
    img = Image.new("RGBA", (2, 1))
    img.putpixel((0, 0), (100, 40, 0, 10))
    img.putpixel((1, 0), (200, 80, 0, 30))
    level = from_pil(img).rgba_level(1, 1)
    # Premultiplied filtering would give red 175
    assert level == bytes([150, 60, 0, 20])


def test_oversized_source_is_unsupported(tmp_path, monkeypatch):
    path = tmp_path / "big.png"
    Image.new("RGBA", (16, 16)).save(path)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(SourceImageError) as exc:
        decode(path)
    assert exc.value.code == "E_SOURCE_UNSUPPORTED"
