import pytest

from tifgen.packing.errors import ConfigurationError
from tifgen.texture.formats import (
    BlockAlgorithm,
    BlockCompressed,
    EngineVariant,
    PixelFormat,
    SUPPORTED_FORMATS,
    Uncompressed,
    bytes_per_pixel,
    flags_for,
    resolve,
    resolve_variant,
    storage_class,
)

EXPECTED_CODES = {
    "argb8888": 0x000,
    "rgb565": 0x001,
    "argb4444": 0x003,
    "l8": 0x005,
    "la88": 0x007,
    "dxt1": 0x100,
    "dxt3": 0x300,
    "dxt5": 0x500,
}


def test_supported_names_are_exactly_the_eight_formats():
    assert set(SUPPORTED_FORMATS) == set(EXPECTED_CODES)


@pytest.mark.parametrize("name,code", sorted(EXPECTED_CODES.items()))
def test_resolve_returns_format_with_table_code(name, code):
    fmt = resolve(name)
    assert fmt.label == name
    assert fmt.code == code


@pytest.mark.parametrize("name", ["foo", "DXT1", "Dxt1", " l8", "argb5551", ""])
def test_resolve_rejects_unknown_names(name):
    with pytest.raises(ConfigurationError) as exc:
        resolve(name)
    assert exc.value.code == "E_UNKNOWN_FORMAT"
    assert exc.value.context == {"format": name}


def test_resolve_variant():
    assert resolve_variant("ma1") is EngineVariant.VARIANT_A
    assert resolve_variant("ma2") is EngineVariant.VARIANT_B
    with pytest.raises(ConfigurationError) as exc:
        resolve_variant("ma3")
    assert exc.value.code == "E_UNKNOWN_VARIANT"


@pytest.mark.parametrize("fmt", list(PixelFormat))
@pytest.mark.parametrize("variant", list(EngineVariant))
def test_flags_variant_bit_and_code(fmt, variant):
    flags = flags_for(fmt, variant)
    assert bool(flags & 0x80000000) == (variant is EngineVariant.VARIANT_B)
    assert flags & 0x7FFFFFFF == EXPECTED_CODES[fmt.label]


def test_bytes_per_pixel():
    assert bytes_per_pixel(PixelFormat.L8) == 1
    assert bytes_per_pixel(PixelFormat.RGB565) == 2
    assert bytes_per_pixel(PixelFormat.ARGB4444) == 2
    assert bytes_per_pixel(PixelFormat.LA88) == 2
    assert bytes_per_pixel(PixelFormat.ARGB8888) == 4
    with pytest.raises(ValueError):
        bytes_per_pixel(PixelFormat.DXT1)


def test_storage_classes():
    assert storage_class(PixelFormat.ARGB8888) == Uncompressed(4)
    assert storage_class(PixelFormat.DXT1) == BlockCompressed(BlockAlgorithm.BC1)
    assert storage_class(PixelFormat.DXT3) == BlockCompressed(BlockAlgorithm.BC2)
    assert storage_class(PixelFormat.DXT5) == BlockCompressed(BlockAlgorithm.BC3)


def test_variant_properties():
    a, b = EngineVariant.VARIANT_A, EngineVariant.VARIANT_B
    assert (a.schema_version, b.schema_version) == (2, 4)
    assert (a.sub_chunk_count, b.sub_chunk_count) == (7, 9)
    assert not a.has_frame_chunks and b.has_frame_chunks
