"""Path utilities (safe resolution, output naming)."""

from __future__ import annotations
from pathlib import Path

__all__ = ["safe_file_path", "default_output_path"]


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    base_dir = base_dir.resolve()
    resolved = (base_dir / file_path).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    return resolved


def default_output_path(source: Path) -> Path:
    """``art/mech.png`` -> ``art/mech.tif``."""
    return source.with_suffix(".tif")
