"""Pure binary packing functions for the MGIc container.

All functions are side-effect free and validate sizes.
"""

from __future__ import annotations

import struct

from .constants import (
    BITS_CHUNK_OVERHEAD,
    BYTE_CHUNK_SIZE,
    CONTAINER_MAGIC,
    CONTAINER_VERSION,
    HEADER_PADDING,
    OUTER_HEADER_SIZE,
    PIC_HEADER_SIZE,
    PIC_TAG,
    RECORD_COUNT,
    TAG_BITS,
    U32_CHUNK_SIZE,
)
from .errors import layout_error

__all__ = [
    "pack_outer_header",
    "pack_pic_header",
    "pack_byte_chunk",
    "pack_u32_chunk",
    "pack_bits_header",
]


def _check_tag(tag: bytes) -> None:
    if len(tag) != 4:
        raise layout_error(f"Chunk tag must be 4 bytes: {tag!r}")


def pack_outer_header(total_length: int) -> bytes:
    out = (
        struct.pack("<I", CONTAINER_VERSION)
        + CONTAINER_MAGIC
        + struct.pack("<I", total_length)
        + struct.pack("<I", RECORD_COUNT)
        + b"\x00" * HEADER_PADDING
    )
    if len(out) != OUTER_HEADER_SIZE:  # pragma: no cover
        raise layout_error(f"Outer header size mismatch: {len(out)}")
    return out


def pack_pic_header(pic_length: int, sub_chunk_count: int) -> bytes:
    out = (
        PIC_TAG
        + b"\x00" * 4
        + struct.pack("<I", pic_length)
        + struct.pack("<I", sub_chunk_count)
    )
    if len(out) != PIC_HEADER_SIZE:  # pragma: no cover
        raise layout_error(f"PIC header size mismatch: {len(out)}")
    return out


def pack_byte_chunk(tag: bytes, value: int) -> bytes:
    _check_tag(tag)
    out = tag + struct.pack("<I", BYTE_CHUNK_SIZE) + struct.pack("<B", value)
    if len(out) != BYTE_CHUNK_SIZE:  # pragma: no cover
        raise layout_error(f"Byte chunk size mismatch: {len(out)}")
    return out


def pack_u32_chunk(tag: bytes, value: int) -> bytes:
    _check_tag(tag)
    out = tag + struct.pack("<I", U32_CHUNK_SIZE) + struct.pack("<I", value)
    if len(out) != U32_CHUNK_SIZE:  # pragma: no cover
        raise layout_error(f"u32 chunk size mismatch: {len(out)}")
    return out


def pack_bits_header(payload_size: int) -> bytes:
    """``bits`` tag and its length field; the payload follows directly."""
    return TAG_BITS + struct.pack("<I", payload_size + BITS_CHUNK_OVERHEAD)
