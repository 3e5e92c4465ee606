"""Source image decoding (Pillow)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple

from PIL import Image, UnidentifiedImageError

from ..packing.errors import (
    E_SOURCE_NOT_FOUND,
    E_SOURCE_UNSUPPORTED,
    SourceImageError,
)

__all__ = ["SourceImage", "decode", "from_pil"]

SUPPORTED_SOURCE_FORMATS = ("PNG", "BMP")


@dataclass(frozen=True, slots=True)
class SourceImage:
    """Decoded image held as RGBA8; immutable once decoded."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def sample(self, x: int, y: int) -> Tuple[int, int, int, int]:
        return self.image.getpixel((x, y))

    def samples(self, mode: str = "RGBA") -> Iterator[Tuple[int, ...]]:
        """Row-major channel tuples, converted to ``mode`` first."""
        img = self.image if mode == "RGBA" else self.image.convert(mode)
        raw = img.tobytes()
        step = len(mode)
        for o in range(0, len(raw), step):
            yield tuple(raw[o : o + step])

    def rgba_level(self, width: int, height: int) -> bytes:
        """RGBA8 bytes of the image box-filtered to ``width`` x ``height``.

        Channels are filtered one band at a time so colour stays straight
        (not premultiplied by alpha); Pillow premultiplies when resizing RGBA.
        """
        if (width, height) == self.image.size:
            return self.image.tobytes()
        bands = [
            band.resize((width, height), resample=Image.Resampling.BOX)
            for band in self.image.split()
        ]
        return Image.merge("RGBA", bands).tobytes()


def from_pil(image: Image.Image) -> SourceImage:
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return SourceImage(image)


def decode(path: str | Path) -> SourceImage:
    p = Path(path)
    if not p.is_file():
        raise SourceImageError(
            E_SOURCE_NOT_FOUND, f"File not found: {p}", {"path": str(p)}
        )
    try:
        with Image.open(p) as img:
            if img.format not in SUPPORTED_SOURCE_FORMATS:
                raise SourceImageError(
                    E_SOURCE_UNSUPPORTED,
                    f"Unsupported image format {img.format} (png or bmp expected)",
                    {"path": str(p), "format": img.format},
                )
            # convert() copies, so the pixels outlive the file handle
            return SourceImage(img.convert("RGBA"))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise SourceImageError(
            E_SOURCE_UNSUPPORTED,
            f"Cannot decode {p.name}: {exc}",
            {"path": str(p)},
        ) from exc
