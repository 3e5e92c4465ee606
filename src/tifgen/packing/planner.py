"""Container layout planning.

The container stores every length field ahead of the data it describes, so
the whole layout (mip chain, payload size, chunk lengths) is computed here
before the writer emits a single byte. The writer consumes the resulting
:class:`ContainerLayout` as the single source of truth and validates what it
writes against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..logging import get_logger
from ..texture import mips
from ..texture.formats import (
    EngineVariant,
    PixelFormat,
    flags_for,
    is_block_compressed,
)
from ..texture.mips import MipLevel
from .constants import (
    BITS_CHUNK_OVERHEAD,
    BYTE_CHUNK_SIZE,
    OUTER_HEADER_SIZE,
    PIC_HEADER_SIZE,
    TAG_DEPTH,
    TAG_FLAGS,
    TAG_FRAMES,
    TAG_HEIGHT,
    TAG_MIPS,
    TAG_SIZE,
    TAG_VERSION,
    TAG_WIDTH,
    U32_CHUNK_SIZE,
)
from .errors import E_DIMENSIONS, E_ODD_DIMENSIONS, GeometryError

__all__ = [
    "TextureDescriptor",
    "SubChunkPlan",
    "ContainerLayout",
    "validate_descriptor",
    "compute_layout",
    "to_layout_dict",
]


@dataclass(frozen=True, slots=True)
class TextureDescriptor:
    width: int
    height: int
    pixel_format: PixelFormat
    variant: EngineVariant


@dataclass(frozen=True, slots=True)
class SubChunkPlan:
    tag: bytes
    offset: int
    length: int
    value: int


@dataclass(frozen=True, slots=True)
class ContainerLayout:
    descriptor: TextureDescriptor
    flags: int
    levels: Tuple[MipLevel, ...]
    payload_size: int
    pic_length: int
    total_length: int
    sub_chunks: Tuple[SubChunkPlan, ...]
    bits_offset: int
    payload_offset: int

    @property
    def mip_count(self) -> int:
        return len(self.levels)

    @property
    def bits_length(self) -> int:
        return self.payload_size + BITS_CHUNK_OVERHEAD


def validate_descriptor(desc: TextureDescriptor) -> None:
    if desc.width <= 0 or desc.height <= 0:
        raise GeometryError(
            E_DIMENSIONS,
            f"Texture dimensions must be positive, got {desc.width}x{desc.height}",
            {"width": desc.width, "height": desc.height},
        )
    if is_block_compressed(desc.pixel_format) and (
        desc.width % 2 or desc.height % 2
    ):
        raise GeometryError(
            E_ODD_DIMENSIONS,
            f"{desc.pixel_format.label} requires even width and height, "
            f"got {desc.width}x{desc.height}",
            {
                "format": desc.pixel_format.label,
                "width": desc.width,
                "height": desc.height,
            },
        )


def _header_values(
    desc: TextureDescriptor, flags: int, mip_count: int, payload_size: int
) -> List[Tuple[bytes, int, int]]:
    values = [
        (TAG_VERSION, BYTE_CHUNK_SIZE, desc.variant.schema_version),
        (TAG_FLAGS, U32_CHUNK_SIZE, flags),
        (TAG_WIDTH, U32_CHUNK_SIZE, desc.width),
        (TAG_HEIGHT, U32_CHUNK_SIZE, desc.height),
        (TAG_MIPS, U32_CHUNK_SIZE, mip_count),
        (TAG_SIZE, U32_CHUNK_SIZE, payload_size),
    ]
    if desc.variant.has_frame_chunks:
        values.append((TAG_FRAMES, U32_CHUNK_SIZE, 1))
        values.append((TAG_DEPTH, U32_CHUNK_SIZE, 1))
    return values


def compute_layout(desc: TextureDescriptor) -> ContainerLayout:
    """Validate ``desc`` and compute every offset and length of its container."""
    logger = get_logger()
    validate_descriptor(desc)
    levels = tuple(mips.plan(desc.pixel_format, desc.width, desc.height))
    if not levels:
        logger.warning(
            "%dx%d %s has no mip levels; container will carry an empty payload",
            desc.width,
            desc.height,
            desc.pixel_format.label,
        )
    payload_size = mips.total_size(list(levels))
    flags = flags_for(desc.pixel_format, desc.variant)

    sub_chunks: List[SubChunkPlan] = []
    cursor = OUTER_HEADER_SIZE + PIC_HEADER_SIZE
    for tag, length, value in _header_values(
        desc, flags, len(levels), payload_size
    ):
        sub_chunks.append(SubChunkPlan(tag, cursor, length, value))
        cursor += length
    bits_offset = cursor
    payload_offset = bits_offset + BITS_CHUNK_OVERHEAD

    pic_length = (
        PIC_HEADER_SIZE
        + sum(c.length for c in sub_chunks)
        + payload_size
        + BITS_CHUNK_OVERHEAD
    )
    total_length = pic_length + OUTER_HEADER_SIZE
    if payload_offset + payload_size != total_length:  # pragma: no cover
        raise RuntimeError(
            f"Layout inconsistency: payload ends at {payload_offset + payload_size}"
            f" but total_length={total_length}"
        )
    return ContainerLayout(
        descriptor=desc,
        flags=flags,
        levels=levels,
        payload_size=payload_size,
        pic_length=pic_length,
        total_length=total_length,
        sub_chunks=tuple(sub_chunks),
        bits_offset=bits_offset,
        payload_offset=payload_offset,
    )


def to_layout_dict(layout: ContainerLayout) -> Dict[str, Any]:  # lightweight serializer
    desc = layout.descriptor
    return {
        "format": desc.pixel_format.label,
        "variant": desc.variant.value,
        "width": desc.width,
        "height": desc.height,
        "flags": layout.flags,
        "mip_count": layout.mip_count,
        "payload_size": layout.payload_size,
        "bits_length": layout.bits_length,
        "pic_length": layout.pic_length,
        "total_length": layout.total_length,
        "payload_offset": layout.payload_offset,
        "sub_chunks": [
            {
                "tag": c.tag.decode("ascii"),
                "offset": c.offset,
                "length": c.length,
                "value": c.value,
            }
            for c in layout.sub_chunks
        ],
        "levels": [
            {
                "index": lvl.index,
                "width": lvl.width,
                "height": lvl.height,
                "size": lvl.size,
            }
            for lvl in layout.levels
        ],
    }
