"""Mip chain planning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .compression import compressed_size
from .formats import BlockCompressed, PixelFormat
from .pixels import uncompressed_size

__all__ = ["MipLevel", "level_count", "plan", "total_size"]


@dataclass(frozen=True, slots=True)
class MipLevel:
    index: int
    width: int
    height: int
    size: int


def level_count(width: int, height: int) -> int:
    """Number of mip levels stored for a block-compressed texture.

    This is the popcount of ``(min(width, height) - 1) >> 1``, which is not the
    usual ``floor(log2(min)) + 1``. Consumers size their reads from it, so it
    must stay as is.
    """
    return bin((min(width, height) - 1) >> 1).count("1")


def plan(fmt: PixelFormat, width: int, height: int) -> List[MipLevel]:
    """Levels largest first; uncompressed formats always get a single level."""
    storage = fmt.storage
    if not isinstance(storage, BlockCompressed):
        return [MipLevel(0, width, height, uncompressed_size(fmt, width, height))]
    levels: List[MipLevel] = []
    for i in range(level_count(width, height)):
        w = width >> i
        h = height >> i
        levels.append(MipLevel(i, w, h, compressed_size(storage.algorithm, w, h)))
    return levels


def total_size(levels: List[MipLevel]) -> int:
    return sum(level.size for level in levels)
