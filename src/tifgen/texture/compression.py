"""Block compression (BC1/BC2/BC3, a.k.a. DXT1/DXT3/DXT5).

The container encoder only needs two things from here: the compressed size of
a level, known before compressing, and the compressed bytes themselves.

Block layouts (one block per 4x4 pixels, row-major block order):
    BC1:  8 bytes  = RGB565 c0, RGB565 c1, 16 x 2-bit colour indices
    BC2: 16 bytes  = 16 x 4-bit explicit alpha, then a BC1 colour block
    BC3: 16 bytes  = alpha0, alpha1, 16 x 3-bit alpha indices, then BC1 colour

Endpoints are chosen from the inset min/max bounding box of the block, which
is fast and deterministic rather than optimal.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..packing.errors import E_CODEC, CodecError
from .formats import BlockAlgorithm

__all__ = [
    "CompressParams",
    "block_bytes",
    "compressed_size",
    "compress",
]

Texel = Tuple[int, int, int, int]

_BLOCK_BYTES = {
    BlockAlgorithm.BC1: 8,
    BlockAlgorithm.BC2: 16,
    BlockAlgorithm.BC3: 16,
}


@dataclass(frozen=True, slots=True)
class CompressParams:
    # Swap R and B before encoding (BGR565 endpoints)
    swap_rb: bool = False


def block_bytes(algorithm: BlockAlgorithm) -> int:
    return _BLOCK_BYTES[algorithm]


def compressed_size(algorithm: BlockAlgorithm, width: int, height: int) -> int:
    blocks_x = max(1, (width + 3) // 4)
    blocks_y = max(1, (height + 3) // 4)
    return blocks_x * blocks_y * block_bytes(algorithm)


def compress(
    algorithm: BlockAlgorithm,
    rgba_data: bytes,
    width: int,
    height: int,
    params: CompressParams | None = None,
) -> bytes:
    """Compress ``width * height`` RGBA8 pixels (row-major) into blocks."""
    params = params or CompressParams()
    if width <= 0 or height <= 0:
        raise CodecError(
            E_CODEC,
            f"Cannot compress empty image {width}x{height}",
            {"width": width, "height": height},
        )
    if len(rgba_data) != width * height * 4:
        raise CodecError(
            E_CODEC,
            f"RGBA buffer holds {len(rgba_data)} bytes, expected {width * height * 4}",
            {"width": width, "height": height},
        )
    if params.swap_rb:
        rgba_data = _swap_rb_channels(rgba_data)

    if algorithm is BlockAlgorithm.BC1:
        encode = _compress_bc1_block
    elif algorithm is BlockAlgorithm.BC2:
        encode = _compress_bc2_block
    elif algorithm is BlockAlgorithm.BC3:
        encode = _compress_bc3_block
    else:  # pragma: no cover
        raise CodecError(E_CODEC, f"Unknown block algorithm {algorithm}")

    blocks_x = max(1, (width + 3) // 4)
    blocks_y = max(1, (height + 3) // 4)
    out = bytearray()
    for by in range(blocks_y):
        for bx in range(blocks_x):
            block = _extract_block(rgba_data, width, height, bx * 4, by * 4)
            out += encode(block)
    return bytes(out)


# ---------------------------------------------------------------------------
# Block encoders
# ---------------------------------------------------------------------------


def _extract_block(
    rgba_data: bytes, width: int, height: int, x0: int, y0: int
) -> List[Texel]:
    # Pixels past the edge clamp to the nearest edge pixel.
    block: List[Texel] = []
    for row in range(4):
        py = min(y0 + row, height - 1)
        for col in range(4):
            px = min(x0 + col, width - 1)
            o = (py * width + px) * 4
            block.append(
                (rgba_data[o], rgba_data[o + 1], rgba_data[o + 2], rgba_data[o + 3])
            )
    return block


def _rgb565(r: int, g: int, b: int) -> int:
    return ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)


def _compress_bc1_block(block: Sequence[Texel]) -> bytes:
    min_r = min(t[0] for t in block)
    min_g = min(t[1] for t in block)
    min_b = min(t[2] for t in block)
    max_r = max(t[0] for t in block)
    max_g = max(t[1] for t in block)
    max_b = max(t[2] for t in block)

    # Inset the bounding box by 1/16 of its extent
    inset_r = (max_r - min_r) >> 4
    inset_g = (max_g - min_g) >> 4
    inset_b = (max_b - min_b) >> 4
    min_r, min_g, min_b = min_r + inset_r, min_g + inset_g, min_b + inset_b
    max_r, max_g, max_b = max_r - inset_r, max_g - inset_g, max_b - inset_b

    c0 = _rgb565(max_r, max_g, max_b)
    c1 = _rgb565(min_r, min_g, min_b)
    if c0 == c1:
        return struct.pack("<HHI", c0, c1, 0)
    # c0 > c1 selects four-colour mode
    if c0 < c1:
        c0, c1 = c1, c0
        max_r, min_r = min_r, max_r
        max_g, min_g = min_g, max_g
        max_b, min_b = min_b, max_b

    palette = (
        (max_r, max_g, max_b),
        (min_r, min_g, min_b),
        (
            (2 * max_r + min_r + 1) // 3,
            (2 * max_g + min_g + 1) // 3,
            (2 * max_b + min_b + 1) // 3,
        ),
        (
            (max_r + 2 * min_r + 1) // 3,
            (max_g + 2 * min_g + 1) // 3,
            (max_b + 2 * min_b + 1) // 3,
        ),
    )
    indices = 0
    for i, (r, g, b, _a) in enumerate(block):
        best_idx = 0
        best_dist = 0x7FFFFFFF
        for j, (pr, pg, pb) in enumerate(palette):
            dist = (r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2
            if dist < best_dist:
                best_dist = dist
                best_idx = j
        indices |= best_idx << (i * 2)
    return struct.pack("<HHI", c0, c1, indices)


def _compress_bc2_block(block: Sequence[Texel]) -> bytes:
    alpha = bytearray(8)
    for i, texel in enumerate(block):
        a4 = min(15, (texel[3] + 8) // 17)
        if i % 2 == 0:
            alpha[i // 2] |= a4
        else:
            alpha[i // 2] |= a4 << 4
    return bytes(alpha) + _compress_bc1_block(block)


def _compress_bc3_block(block: Sequence[Texel]) -> bytes:
    alphas = [t[3] for t in block]
    alpha0 = max(alphas)
    alpha1 = min(alphas)
    if alpha0 == alpha1:
        alpha_block = struct.pack("<BB", alpha0, alpha1) + b"\x00" * 6
    else:
        # alpha0 > alpha1: eight-entry interpolated palette
        palette = [alpha0, alpha1]
        for i in range(1, 7):
            palette.append(((7 - i) * alpha0 + i * alpha1 + 3) // 7)
        bits = 0
        for i, a in enumerate(alphas):
            best = min(range(8), key=lambda j: abs(a - palette[j]))
            bits |= best << (i * 3)
        alpha_block = (
            struct.pack("<BB", alpha0, alpha1) + struct.pack("<Q", bits)[:6]
        )
    return alpha_block + _compress_bc1_block(block)


def _swap_rb_channels(rgba_data: bytes) -> bytes:
    data = bytearray(rgba_data)
    data[0::4], data[2::4] = data[2::4], data[0::4]
    return bytes(data)
