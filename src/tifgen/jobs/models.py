"""Dataclass models for batch conversion job files."""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..texture.formats import EngineVariant, PixelFormat


@dataclass(slots=True)
class ImageJob:
    source: Path
    pixel_format: PixelFormat
    variant: EngineVariant
    output: Optional[Path] = None


@dataclass(slots=True)
class BatchJob:
    base_dir: Path
    images: List[ImageJob] = field(default_factory=list)


__all__ = ["ImageJob", "BatchJob"]
