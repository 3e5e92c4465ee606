"""Manifest generation for converted textures.

The manifest is an optional JSON artifact summarising one written container:
the source, the resolved format/variant, the header fields, every mip level,
and the SHA-256 of the output file. It is only produced on request.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .packing.planner import ContainerLayout, to_layout_dict

__all__ = ["build_manifest", "manifest_dict"]


def manifest_dict(
    layout: ContainerLayout,
    *,
    source: Path | None = None,
    output: Path | None = None,
    file_sha256: str | None = None,
) -> dict[str, Any]:
    d: dict[str, Any] = {
        "version": 1,
        "source": source.name if source else None,
        "output": output.name if output else None,
        "sha256": file_sha256,
        "layout": to_layout_dict(layout),
    }
    return d


def build_manifest(
    layout: ContainerLayout,
    output_path: Path,
    *,
    source: Path | None = None,
    texture_path: Path | None = None,
    file_sha256: str | None = None,
) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = manifest_dict(
        layout, source=source, output=texture_path, file_sha256=file_sha256
    )
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path
