"""Pixel format catalog and engine variants.

Every supported format is a member of the closed :class:`PixelFormat` enum
carrying its container format code and storage class, so encode time never
compares strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..packing.constants import VARIANT_B_FLAG
from ..packing.errors import (
    E_UNKNOWN_FORMAT,
    E_UNKNOWN_VARIANT,
    config_error,
)

__all__ = [
    "BlockAlgorithm",
    "Uncompressed",
    "BlockCompressed",
    "StorageClass",
    "PixelFormat",
    "EngineVariant",
    "SUPPORTED_FORMATS",
    "SUPPORTED_VARIANTS",
    "resolve",
    "resolve_variant",
    "storage_class",
    "bytes_per_pixel",
    "is_block_compressed",
    "flags_for",
]


class BlockAlgorithm(Enum):
    BC1 = "bc1"
    BC2 = "bc2"
    BC3 = "bc3"


@dataclass(frozen=True, slots=True)
class Uncompressed:
    bytes_per_pixel: int


@dataclass(frozen=True, slots=True)
class BlockCompressed:
    algorithm: BlockAlgorithm


StorageClass = Union[Uncompressed, BlockCompressed]


class PixelFormat(Enum):
    ARGB8888 = ("argb8888", 0x000, Uncompressed(4))
    RGB565 = ("rgb565", 0x001, Uncompressed(2))
    ARGB4444 = ("argb4444", 0x003, Uncompressed(2))
    L8 = ("l8", 0x005, Uncompressed(1))
    LA88 = ("la88", 0x007, Uncompressed(2))
    DXT1 = ("dxt1", 0x100, BlockCompressed(BlockAlgorithm.BC1))
    DXT3 = ("dxt3", 0x300, BlockCompressed(BlockAlgorithm.BC2))
    DXT5 = ("dxt5", 0x500, BlockCompressed(BlockAlgorithm.BC3))

    def __init__(self, label: str, code: int, storage: StorageClass):
        self.label = label
        self.code = code
        self.storage = storage

    @property
    def source_mode(self) -> str:
        """Pillow mode the source image is sampled in for this format."""
        if self in (PixelFormat.L8, PixelFormat.LA88):
            return "LA"
        return "RGBA"


class EngineVariant(Enum):
    """Consumer engine schema. Value is the command line game name."""

    VARIANT_A = "ma1"
    VARIANT_B = "ma2"

    @property
    def schema_version(self) -> int:
        return 4 if self is EngineVariant.VARIANT_B else 2

    @property
    def has_frame_chunks(self) -> bool:
        return self is EngineVariant.VARIANT_B

    @property
    def sub_chunk_count(self) -> int:
        return 9 if self.has_frame_chunks else 7


SUPPORTED_FORMATS = tuple(f.label for f in PixelFormat)
SUPPORTED_VARIANTS = tuple(v.value for v in EngineVariant)

_BY_LABEL = {f.label: f for f in PixelFormat}


def resolve(name: str) -> PixelFormat:
    fmt = _BY_LABEL.get(name)
    if fmt is None:
        raise config_error(
            E_UNKNOWN_FORMAT,
            f"Texture format must be one of {list(SUPPORTED_FORMATS)}, got {name!r}",
            {"format": name},
        )
    return fmt


def resolve_variant(name: str) -> EngineVariant:
    for variant in EngineVariant:
        if variant.value == name:
            return variant
    raise config_error(
        E_UNKNOWN_VARIANT,
        f"Game must be one of {list(SUPPORTED_VARIANTS)}, got {name!r}",
        {"variant": name},
    )


def storage_class(fmt: PixelFormat) -> StorageClass:
    return fmt.storage


def is_block_compressed(fmt: PixelFormat) -> bool:
    return isinstance(fmt.storage, BlockCompressed)


def bytes_per_pixel(fmt: PixelFormat) -> int:
    if not isinstance(fmt.storage, Uncompressed):
        raise ValueError(f"{fmt.label} is block compressed")
    return fmt.storage.bytes_per_pixel


def flags_for(fmt: PixelFormat, variant: EngineVariant) -> int:
    high = VARIANT_B_FLAG if variant is EngineVariant.VARIANT_B else 0
    return high | fmt.code
