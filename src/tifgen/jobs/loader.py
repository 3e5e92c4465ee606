"""Batch job loading (JSON/YAML).

A job file names a default ``variant`` and ``format`` and lists images::

    variant: ma2
    format: dxt1
    images:
      - path: mechs/atlas.png
      - path: ui/font.bmp
        format: la88
        output: out/font.tif
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from ..packing.errors import E_JOB_FIELD, config_error
from ..texture.formats import resolve, resolve_variant
from ..utils.paths import safe_file_path
from .models import BatchJob, ImageJob

__all__ = ["load_job"]


def load_job(path: str | Path) -> BatchJob:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise config_error(E_JOB_FIELD, "Root of job file must be an object")
    return _parse_job_dict(data, p.parent)


def _field(entry: dict[str, Any], key: str, default: Any, where: str) -> Any:
    value = entry.get(key, default)
    if value is None:
        raise config_error(
            E_JOB_FIELD, f"{where}: missing '{key}'", {"field": key}
        )
    if not isinstance(value, str):
        raise config_error(
            E_JOB_FIELD, f"{where}: '{key}' must be a string", {"field": key}
        )
    return value


def _resolve_path(base_dir: Path, raw: str, where: str) -> Path:
    try:
        return safe_file_path(base_dir, raw)
    except ValueError as exc:
        raise config_error(
            E_JOB_FIELD,
            f"{where}: path {raw!r} escapes the job directory",
            {"path": raw},
        ) from exc


def _parse_job_dict(data: dict[str, Any], base_dir: Path) -> BatchJob:
    default_variant = data.get("variant")
    default_format = data.get("format")
    images = data.get("images")
    if not isinstance(images, list):
        raise config_error(E_JOB_FIELD, "'images' must be a list")
    job = BatchJob(base_dir=base_dir)
    for idx, entry in enumerate(images):
        where = f"images[{idx}]"
        if isinstance(entry, str):
            entry = {"path": entry}
        if not isinstance(entry, dict):
            raise config_error(E_JOB_FIELD, f"{where}: must be an object or path")
        source = _resolve_path(base_dir, _field(entry, "path", None, where), where)
        fmt = resolve(_field(entry, "format", default_format, where))
        variant = resolve_variant(_field(entry, "variant", default_variant, where))
        output = None
        if entry.get("output") is not None:
            output = _resolve_path(
                base_dir, _field(entry, "output", None, where), where
            )
        job.images.append(ImageJob(source, fmt, variant, output))
    return job
