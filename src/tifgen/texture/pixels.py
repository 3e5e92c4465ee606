"""Uncompressed pixel packing.

All functions are side-effect free. Samples are channel tuples as produced by
:class:`~tifgen.texture.image_source.SourceImage`: ``(r, g, b, a)`` for RGBA
formats and ``(l, a)`` for the luminance formats.
"""

from __future__ import annotations

import struct
from typing import Iterable, Sequence, Tuple

from ..packing.constants import ROW_ALIGNMENT
from .formats import PixelFormat, bytes_per_pixel

__all__ = [
    "padded_width",
    "pack_value",
    "pack",
    "unpack",
    "pack_rows",
    "uncompressed_size",
]

_STRUCT = {1: "<B", 2: "<H", 4: "<I"}


def padded_width(width: int) -> int:
    rem = width % ROW_ALIGNMENT
    if rem == 0:
        return width
    return width + (ROW_ALIGNMENT - rem)


def pack_value(fmt: PixelFormat, sample: Sequence[int]) -> int:
    """Return the packed bit pattern of one sample as an integer."""
    if fmt is PixelFormat.ARGB8888:
        r, g, b, a = sample[:4]
        return (a << 24) | (r << 16) | (g << 8) | b
    if fmt is PixelFormat.RGB565:
        r, g, b = sample[:3]
        return ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)
    if fmt is PixelFormat.ARGB4444:
        r, g, b, a = sample[:4]
        return ((a >> 4) << 12) | ((r >> 4) << 8) | ((g >> 4) << 4) | (b >> 4)
    if fmt is PixelFormat.L8:
        return sample[0]
    if fmt is PixelFormat.LA88:
        return (sample[0] << 8) | sample[1]
    raise ValueError(f"{fmt.label} is not an uncompressed format")


def pack(fmt: PixelFormat, sample: Sequence[int]) -> bytes:
    return struct.pack(_STRUCT[bytes_per_pixel(fmt)], pack_value(fmt, sample))


def unpack(fmt: PixelFormat, value: int) -> Tuple[int, ...]:
    """Inverse of :func:`pack_value` at the stored precision.

    Channels come back in sample order with their low bits cleared, e.g.
    ``unpack(RGB565, pack_value(RGB565, (r, g, b, a)))`` gives
    ``(r & 0xF8, g & 0xFC, b & 0xF8)``.
    """
    if fmt is PixelFormat.ARGB8888:
        return (
            (value >> 16) & 0xFF,
            (value >> 8) & 0xFF,
            value & 0xFF,
            (value >> 24) & 0xFF,
        )
    if fmt is PixelFormat.RGB565:
        return (
            ((value >> 11) & 0x1F) << 3,
            ((value >> 5) & 0x3F) << 2,
            (value & 0x1F) << 3,
        )
    if fmt is PixelFormat.ARGB4444:
        return (
            ((value >> 8) & 0xF) << 4,
            ((value >> 4) & 0xF) << 4,
            (value & 0xF) << 4,
            ((value >> 12) & 0xF) << 4,
        )
    if fmt is PixelFormat.L8:
        return (value & 0xFF,)
    if fmt is PixelFormat.LA88:
        return ((value >> 8) & 0xFF, value & 0xFF)
    raise ValueError(f"{fmt.label} is not an uncompressed format")


def uncompressed_size(fmt: PixelFormat, width: int, height: int) -> int:
    return bytes_per_pixel(fmt) * padded_width(width) * height


def pack_rows(
    fmt: PixelFormat,
    samples: Iterable[Sequence[int]],
    width: int,
    height: int,
) -> bytes:
    """Pack ``width * height`` row-major samples with 16-pixel row padding."""
    bpp = bytes_per_pixel(fmt)
    code = _STRUCT[bpp]
    pad = b"\x00" * (bpp * (padded_width(width) - width))
    out = bytearray()
    it = iter(samples)
    for _y in range(height):
        for _x in range(width):
            out += struct.pack(code, pack_value(fmt, next(it)))
        out += pad
    expected = uncompressed_size(fmt, width, height)
    if len(out) != expected:  # pragma: no cover
        raise RuntimeError(
            f"Packed payload size mismatch: expected {expected} got {len(out)}"
        )
    return bytes(out)
