"""High-level API for tifgen.

Every entry point resolves the format and variant first, then decodes the
source, then computes the full container layout, and only then touches the
output. Configuration and geometry errors therefore never create a file.
"""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List

from .jobs.loader import load_job
from .logging import get_logger
from .manifest import build_manifest
from .packing.inspector import inspect_file, validate_container
from .packing.planner import (
    ContainerLayout,
    TextureDescriptor,
    compute_layout,
    to_layout_dict,
)
from .packing.writer import encode_levels, write_container
from .reporting import get_reporter, task
from .texture.compression import CompressParams
from .texture.formats import (
    EngineVariant,
    PixelFormat,
    resolve,
    resolve_variant,
)
from .texture.image_source import SourceImage, decode
from .utils.io import atomic_output
from .utils.paths import default_output_path

__all__ = [
    "ConvertOptions",
    "ConvertResult",
    "convert_image",
    "encode_texture",
    "plan_texture",
    "inspect_texture",
    "validate_texture",
    "run_batch",
    "ContainerLayout",
]


@dataclass(slots=True)
class ConvertOptions:
    source: Path
    pixel_format: str | PixelFormat
    variant: str | EngineVariant
    # Defaults to the source path with a .tif suffix
    output_path: Path | None = None
    # Optional path; when provided a manifest JSON is written next to the texture
    manifest_path: Path | None = None
    swap_rb: bool = False


@dataclass(slots=True)
class ConvertResult:
    output_file: Path
    bytes_written: int
    layout: ContainerLayout


def _as_format(value: str | PixelFormat) -> PixelFormat:
    return value if isinstance(value, PixelFormat) else resolve(value)


def _as_variant(value: str | EngineVariant) -> EngineVariant:
    return value if isinstance(value, EngineVariant) else resolve_variant(value)


def _layout_for(
    image: SourceImage, fmt: PixelFormat, variant: EngineVariant
) -> ContainerLayout:
    desc = TextureDescriptor(image.width, image.height, fmt, variant)
    layout = compute_layout(desc)
    get_reporter().status(
        "Layout summary: "
        + f"format={fmt.label} variant={variant.value} size={image.width}x{image.height} "
        + f"mips={layout.mip_count} payload={layout.payload_size} "
        + f"pic_length={layout.pic_length} total_length={layout.total_length}"
    )
    return layout


def encode_texture(
    image: SourceImage,
    pixel_format: str | PixelFormat,
    variant: str | EngineVariant,
    params: CompressParams | None = None,
) -> bytes:
    """Encode ``image`` into container bytes held in memory."""
    fmt = _as_format(pixel_format)
    var = _as_variant(variant)
    layout = _layout_for(image, fmt, var)
    buf = io.BytesIO()
    write_container(buf, layout, encode_levels(layout, image, params))
    return buf.getvalue()


def plan_texture(
    source: str | Path,
    pixel_format: str | PixelFormat,
    variant: str | EngineVariant,
) -> tuple[ContainerLayout, dict]:
    """Compute the container layout for ``source`` without writing output.

    Returns (ContainerLayout, layout_dict) where layout_dict is JSON-serialisable.
    """
    fmt = _as_format(pixel_format)
    var = _as_variant(variant)
    image = decode(source)
    layout = _layout_for(image, fmt, var)
    return layout, to_layout_dict(layout)


def convert_image(options: ConvertOptions) -> ConvertResult:
    logger = get_logger()
    rep = get_reporter()
    fmt = _as_format(options.pixel_format)
    var = _as_variant(options.variant)
    source = Path(options.source)
    output = options.output_path or default_output_path(source)

    image = decode(source)
    layout = _layout_for(image, fmt, var)
    params = CompressParams(swap_rb=options.swap_rb)
    logger.info("Writing %s...", output)
    with atomic_output(output) as f:
        bytes_written = write_container(
            f, layout, encode_levels(layout, image, params)
        )
    rep.status(
        "Write summary: "
        + f"file={output.name} bytes={bytes_written} mips={layout.mip_count}"
    )

    if options.manifest_path is not None:
        with task("manifest.emit", "Emit manifest"):
            file_sha256 = hashlib.sha256(output.read_bytes()).hexdigest()
            build_manifest(
                layout,
                options.manifest_path,
                source=source,
                texture_path=output,
                file_sha256=file_sha256,
            )
            rep.status(
                "Manifest summary: "
                + f"file={options.manifest_path.name} sha256={file_sha256[:12]}"
            )
    return ConvertResult(
        output_file=output, bytes_written=bytes_written, layout=layout
    )


def inspect_texture(path: str | Path) -> dict[str, Any]:
    return inspect_file(path)


def validate_texture(path: str | Path) -> list[str]:
    return validate_container(inspect_file(path))


def run_batch(job_path: str | Path) -> List[ConvertResult]:
    """Convert every image of a job file, stopping at the first failure."""
    rep = get_reporter()
    job = load_job(job_path)
    results: List[ConvertResult] = []
    with task("batch", "Batch conversion", total=len(job.images)):
        for image_job in job.images:
            results.append(
                convert_image(
                    ConvertOptions(
                        source=image_job.source,
                        pixel_format=image_job.pixel_format,
                        variant=image_job.variant,
                        output_path=image_job.output,
                    )
                )
            )
            rep.advance("batch", current_item=image_job.source.name)
    rep.status(
        "Batch summary: "
        + f"images={len(results)} bytes={sum(r.bytes_written for r in results)}"
    )
    return results
