from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from tifgen.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _silent_reporter():
    set_reporter(SilentReporter())
    set_verbosity(0)
    yield
    set_reporter(SilentReporter())


@pytest.fixture
def make_png(tmp_path: Path):
    """Write a solid-colour RGBA PNG and return its path."""

    def _make(
        name: str,
        width: int,
        height: int,
        color: tuple[int, int, int, int] = (77, 77, 77, 255),
        fmt: str = "PNG",
    ) -> Path:
        path = tmp_path / name
        Image.new("RGBA", (width, height), color).save(path, format=fmt)
        return path

    return _make
