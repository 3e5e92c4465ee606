"""Binary writer emitting an MGIc texture container from a ContainerLayout.

The writer performs no layout math of its own. Header fields come straight
from the :class:`ContainerLayout`, and every mip payload is checked against
its planned size before it is written, so the header can never disagree with
the data behind it.
"""

from __future__ import annotations

from typing import BinaryIO, Iterable, Iterator

from ..logging import get_logger
from ..reporting import TaskStatus, get_reporter
from ..texture.compression import CompressParams, compress
from ..texture.formats import BlockCompressed
from ..texture.image_source import SourceImage
from ..texture.pixels import pack_rows
from .constants import BYTE_CHUNK_SIZE
from .errors import E_CODEC, E_WRITE_IO, CodecError, WriteError, layout_error
from .packers import (
    pack_bits_header,
    pack_byte_chunk,
    pack_outer_header,
    pack_pic_header,
    pack_u32_chunk,
)
from .planner import ContainerLayout

__all__ = ["pack_header", "encode_levels", "write_container"]


def pack_header(layout: ContainerLayout) -> bytes:
    """Everything before the first payload byte, including the bits prefix."""
    desc = layout.descriptor
    out = bytearray(pack_outer_header(layout.total_length))
    out += pack_pic_header(layout.pic_length, desc.variant.sub_chunk_count)
    for chunk in layout.sub_chunks:
        if len(out) != chunk.offset:
            raise layout_error(
                f"Sub-chunk {chunk.tag!r} at {len(out)}, planned {chunk.offset}"
            )
        if chunk.length == BYTE_CHUNK_SIZE:
            out += pack_byte_chunk(chunk.tag, chunk.value)
        else:
            out += pack_u32_chunk(chunk.tag, chunk.value)
    if len(out) != layout.bits_offset:
        raise layout_error(
            f"bits chunk at {len(out)}, planned {layout.bits_offset}"
        )
    out += pack_bits_header(layout.payload_size)
    return bytes(out)


def encode_levels(
    layout: ContainerLayout,
    image: SourceImage,
    params: CompressParams | None = None,
) -> Iterator[bytes]:
    """Yield each mip payload, largest level first."""
    desc = layout.descriptor
    fmt = desc.pixel_format
    if (image.width, image.height) != (desc.width, desc.height):
        raise layout_error(
            f"Image is {image.width}x{image.height}, layout expects "
            f"{desc.width}x{desc.height}"
        )
    storage = fmt.storage
    if not isinstance(storage, BlockCompressed):
        yield pack_rows(
            fmt, image.samples(fmt.source_mode), desc.width, desc.height
        )
        return
    for level in layout.levels:
        rgba = image.rgba_level(level.width, level.height)
        data = compress(
            storage.algorithm, rgba, level.width, level.height, params
        )
        if len(data) != level.size:
            raise CodecError(
                E_CODEC,
                f"Level {level.index} compressed to {len(data)} bytes, "
                f"expected {level.size}",
                {"level": level.index, "width": level.width, "height": level.height},
            )
        yield data


def _write(sink: BinaryIO, data: bytes, what: str) -> None:
    try:
        n = sink.write(data)
    except OSError as exc:
        raise WriteError(
            E_WRITE_IO, f"Failed writing {what}: {exc}", {"what": what}
        ) from exc
    # Buffered sinks return None or len(data); raw sinks may write short.
    if n is not None and n != len(data):
        raise WriteError(
            E_WRITE_IO,
            f"Short write for {what}: {n} of {len(data)} bytes",
            {"what": what, "written": n, "expected": len(data)},
        )


def write_container(
    sink: BinaryIO, layout: ContainerLayout, payloads: Iterable[bytes]
) -> int:
    """Write header and level payloads to ``sink``; returns bytes written."""
    logger = get_logger()
    rep = get_reporter()
    header = pack_header(layout)
    _write(sink, header, "header")
    written = len(header)
    levels = layout.levels
    rep.start_task("write.mips", "Mip levels", total=len(levels))
    try:
        index = 0
        for payload in payloads:
            if index >= len(levels):
                raise layout_error(
                    f"Received more payloads than the {len(levels)} planned levels"
                )
            level = levels[index]
            if len(payload) != level.size:
                raise layout_error(
                    f"Level {index} payload is {len(payload)} bytes, planned {level.size}"
                )
            _write(sink, payload, f"mip level {index}")
            written += len(payload)
            index += 1
            rep.advance(
                "write.mips", current_item=f"{level.width}x{level.height}"
            )
        if index != len(levels):
            raise layout_error(
                f"Wrote {index} mip levels, planned {len(levels)}"
            )
    except Exception:
        rep.end_task("write.mips", TaskStatus.FAILED)
        raise
    if written != layout.total_length:
        raise layout_error(
            f"Wrote {written} bytes, planned {layout.total_length}"
        )
    rep.end_task(
        "write.mips",
        levels=len(levels),
        bytes=layout.payload_size,
        planned=layout.payload_size,
    )
    logger.debug(
        "Wrote container total_length=%d pic_length=%d payload=%d",
        written,
        layout.pic_length,
        layout.payload_size,
    )
    return written
