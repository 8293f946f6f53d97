from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image
from pptx import Presentation

from slidefit.theme import Theme


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a solid PNG of the given pixel size."""

    def _make(width: int, height: int, name: str | None = None) -> Path:
        path = tmp_path / (name or f"img_{width}x{height}.png")
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (width, height), (151, 177, 223)).save(path)
        return path

    return _make


@pytest.fixture
def wide_png(make_png) -> Path:
    """A 16:9 image."""
    return make_png(1600, 900, "wide.png")


@pytest.fixture
def blank_slide():
    prs = Presentation()
    return prs.slides.add_slide(prs.slide_layouts[6])


@pytest.fixture
def theme() -> Theme:
    return Theme()
