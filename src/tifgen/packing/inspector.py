"""Container structure inspection.

Walks the chunk records of an existing MGIc texture and checks every length
field against the data actually present. Pixel payloads are measured, never
decoded.

Public functions:
- inspect_container(data) -> dict
- inspect_file(path) -> dict
- validate_container(info) -> list[str]
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Any, Dict, List

from ..texture.formats import EngineVariant, PixelFormat
from .constants import (
    BITS_CHUNK_OVERHEAD,
    BYTE_CHUNK_SIZE,
    CONTAINER_MAGIC,
    CONTAINER_VERSION,
    FORMAT_CODE_MASK,
    OUTER_HEADER_SIZE,
    PIC_HEADER_SIZE,
    PIC_TAG,
    TAG_BITS,
    U32_CHUNK_SIZE,
    VARIANT_B_FLAG,
)
from .errors import E_INSPECT, InspectError

__all__ = ["inspect_container", "inspect_file", "validate_container"]

_CODE_TO_FORMAT = {f.code: f for f in PixelFormat}


def _read_exact(data: bytes, offset: int, size: int, label: str) -> bytes:
    end = offset + size
    if end > len(data):
        raise InspectError(
            E_INSPECT,
            f"Out of range read for {label}: {offset}+{size}>{len(data)}",
            {"offset": offset, "size": size},
        )
    return data[offset:end]


def parse_outer_header(data: bytes) -> Dict[str, Any]:
    raw = _read_exact(data, 0, OUTER_HEADER_SIZE, "outer header")
    version, magic, total_length, record_count = struct.unpack_from(
        "<I4sII", raw, 0
    )
    return {
        "version": version,
        "magic": magic.decode("latin-1"),
        "magic_ok": magic == CONTAINER_MAGIC and version == CONTAINER_VERSION,
        "total_length": total_length,
        "record_count": record_count,
        "padding_zero": raw[16:] == b"\x00" * 16,
    }


def parse_pic_header(data: bytes) -> Dict[str, Any]:
    raw = _read_exact(data, OUTER_HEADER_SIZE, PIC_HEADER_SIZE, "PIC header")
    tag, reserved, pic_length, sub_chunk_count = struct.unpack_from(
        "<4s4sII", raw, 0
    )
    return {
        "tag": tag.decode("latin-1"),
        "tag_ok": tag == PIC_TAG,
        "reserved_zero": reserved == b"\x00" * 4,
        "length": pic_length,
        "sub_chunk_count": sub_chunk_count,
    }


def inspect_container(data: bytes) -> Dict[str, Any]:
    header = parse_outer_header(data)
    pic = parse_pic_header(data)
    chunks: List[Dict[str, Any]] = []
    fields: Dict[str, int] = {}
    offset = OUTER_HEADER_SIZE + PIC_HEADER_SIZE
    bits: Dict[str, Any] | None = None
    while offset < len(data):
        raw = _read_exact(data, offset, 8, "chunk header")
        tag_b, length = struct.unpack_from("<4sI", raw, 0)
        tag = tag_b.decode("latin-1")
        if tag_b == TAG_BITS:
            payload = len(data) - offset - BITS_CHUNK_OVERHEAD
            bits = {"offset": offset, "length": length, "payload_bytes": payload}
            chunks.append({"tag": tag, "offset": offset, "length": length})
            break
        if length == BYTE_CHUNK_SIZE:
            value = _read_exact(data, offset + 8, 1, tag)[0]
        elif length == U32_CHUNK_SIZE:
            value = struct.unpack("<I", _read_exact(data, offset + 8, 4, tag))[0]
        else:
            raise InspectError(
                E_INSPECT,
                f"Unexpected length {length} for chunk {tag!r} at {offset}",
                {"tag": tag, "offset": offset},
            )
        chunks.append(
            {"tag": tag, "offset": offset, "length": length, "value": value}
        )
        fields[tag.strip()] = value
        offset += length

    info: Dict[str, Any] = {
        "file_size": len(data),
        "header": header,
        "pic": pic,
        "chunks": chunks,
        "fields": fields,
        "bits": bits,
    }
    flags = fields.get("flgs")
    if flags is not None:
        fmt = _CODE_TO_FORMAT.get(flags & FORMAT_CODE_MASK)
        info["format"] = fmt.label if fmt else None
        info["variant"] = (
            EngineVariant.VARIANT_B.value
            if flags & VARIANT_B_FLAG
            else EngineVariant.VARIANT_A.value
        )
    return info


def inspect_file(path: str | Path) -> Dict[str, Any]:
    return inspect_container(Path(path).read_bytes())


def validate_container(info: Dict[str, Any]) -> List[str]:
    """Return human readable issues; an empty list means the container is sound."""
    issues: List[str] = []
    header = info["header"]
    pic = info["pic"]
    fields = info["fields"]
    bits = info["bits"]
    if not header["magic_ok"]:
        issues.append(f"bad magic/version: {header['magic']!r} {header['version']}")
    if header["record_count"] != 1:
        issues.append(f"record_count={header['record_count']} (expected 1)")
    if header["total_length"] != info["file_size"]:
        issues.append(
            f"total_length={header['total_length']} but file is {info['file_size']} bytes"
        )
    if header["total_length"] != pic["length"] + OUTER_HEADER_SIZE:
        issues.append(
            f"total_length={header['total_length']} != pic_length+{OUTER_HEADER_SIZE}"
        )
    if not pic["tag_ok"]:
        issues.append(f"bad PIC tag {pic['tag']!r}")
    if bits is None:
        issues.append("missing bits chunk")
        return issues
    named = len(info["chunks"])
    if pic["sub_chunk_count"] != named:
        issues.append(
            f"sub_chunk_count={pic['sub_chunk_count']} but found {named} chunks"
        )
    size = fields.get("size")
    if size is None:
        issues.append("missing size chunk")
    else:
        if bits["length"] != size + BITS_CHUNK_OVERHEAD:
            issues.append(f"bits length {bits['length']} != size+8 ({size + 8})")
        if bits["payload_bytes"] != size:
            issues.append(
                f"payload holds {bits['payload_bytes']} bytes, size says {size}"
            )
    if info.get("variant") is not None:
        expected_version = (
            4 if info["variant"] == EngineVariant.VARIANT_B.value else 2
        )
        if fields.get("ver") != expected_version:
            issues.append(
                f"schema version {fields.get('ver')} does not match variant {info['variant']}"
            )
    if info.get("format", "") is None:
        issues.append(f"unknown format code in flags 0x{fields['flgs']:08x}")
    return issues
