from __future__ import annotations

import itertools
import logging

import pytest

from slidefit import fitting
from slidefit.errors import InvalidViewportError, ResourceNotFoundError
from slidefit.fitting import (
    CropWindow,
    FitResult,
    ImageFitter,
    contain_geometry,
    crop_geometry,
)
from slidefit.image_cache import ImageMetadataCache

RATIOS = [0.1, 0.5, 1.0, 4 / 3, 16 / 9, 3.0, 12.5]
BOXES = [(3.5, 2.5), (4.0, 0.8), (1.0, 1.0), (2.0, 5.0), (0.45 * 10, 0.8 * 5.625)]
CASES = list(itertools.product(RATIOS, BOXES))


@pytest.mark.parametrize("ar,box", CASES)
def test_contain_fits_inside_and_preserves_aspect(ar: float, box: tuple[float, float]) -> None:
    w, h = box
    fit = contain_geometry(ar, 0.5, 1.0, w, h)

    assert fit.w <= w + 1e-12
    assert fit.h <= h + 1e-12
    assert fit.w / fit.h == pytest.approx(ar, abs=1e-6)
    assert fit.w == w or fit.h == h
    assert fit.sizing is None


@pytest.mark.parametrize("ar,box", CASES)
def test_contain_is_centered(ar: float, box: tuple[float, float]) -> None:
    w, h = box
    x, y = 1.25, 0.4
    fit = contain_geometry(ar, x, y, w, h)

    assert fit.x == x + (w - fit.w) / 2
    assert fit.y == y + (h - fit.h) / 2


@pytest.mark.parametrize("ar,box", CASES)
def test_crop_window_matches_viewport_exactly(ar: float, box: tuple[float, float]) -> None:
    w, h = box
    fit = crop_geometry(ar, 2.0, 3.0, w, h)

    assert fit.sizing.w == w
    assert fit.sizing.h == h
    assert fit.sizing.type == "crop"
    assert (fit.x, fit.y) == (2.0, 3.0)
    # Virtual size keeps the image's aspect ratio and covers the window
    assert fit.w / fit.h == pytest.approx(ar, rel=1e-9)
    assert fit.sizing.x + fit.sizing.w <= fit.w + 1e-9
    assert fit.sizing.y + fit.sizing.h <= fit.h + 1e-9


@pytest.mark.parametrize("ar,box", CASES)
def test_crop_is_symmetric(ar: float, box: tuple[float, float]) -> None:
    w, h = box
    left, top, right, bottom = crop_geometry(ar, 0, 0, w, h).crop_fractions()

    assert left == pytest.approx(right, abs=1e-9)
    assert top == pytest.approx(bottom, abs=1e-9)
    # Only one axis is ever cropped
    assert left == pytest.approx(0, abs=1e-12) or top == pytest.approx(0, abs=1e-12)


def test_contain_wide_image_in_landscape_box() -> None:
    fit = contain_geometry(16 / 9, 6.2, 1.9, 3.5, 2.5)

    assert fit.w == 3.5
    assert fit.h == pytest.approx(1.96875)
    assert fit.x == pytest.approx(6.2)
    assert fit.y == pytest.approx(1.9 + 0.265625)


def test_crop_wide_image_in_banner_box() -> None:
    fit = crop_geometry(16 / 9, 0.0, 0.0, 4.0, 0.8)

    # ar (1.78) < box ratio (5.0): crop top and bottom
    left, top, right, bottom = fit.crop_fractions()
    assert left == 0 and right == 0
    assert 1 - top - bottom == pytest.approx((16 / 9) / 5.0)
    assert top == pytest.approx(0.32222, abs=1e-4)
    assert fit.w == pytest.approx(4.0)
    assert fit.h == pytest.approx(2.25)
    assert fit.sizing.y == pytest.approx(0.725)
    assert (fit.sizing.w, fit.sizing.h) == (4.0, 0.8)


def test_crop_wide_image_in_square_box() -> None:
    fit = crop_geometry(2.0, 0.0, 0.0, 1.0, 1.0)

    assert (fit.w, fit.h) == (2.0, 1.0)
    assert fit.sizing == CropWindow(x=0.5, y=0.0, w=1.0, h=1.0)
    assert fit.crop_fractions() == (0.25, 0.0, 0.25, 0.0)


def test_square_in_square_has_no_offset() -> None:
    contain = contain_geometry(1.0, 1.0, 1.0, 2.0, 2.0)
    crop = crop_geometry(1.0, 1.0, 1.0, 2.0, 2.0)

    assert (contain.x, contain.y, contain.w, contain.h) == (1.0, 1.0, 2.0, 2.0)
    assert crop.crop_fractions() == (0.0, 0.0, 0.0, 0.0)


@pytest.mark.parametrize("ar", [1e-6, 1e-3, 1e3, 1e6])
def test_crop_extreme_ratios_still_fill_viewport(ar: float) -> None:
    fit = crop_geometry(ar, 0, 0, 3.3, 1.7)

    assert (fit.sizing.w, fit.sizing.h) == (3.3, 1.7)
    assert fit.w / fit.h == pytest.approx(ar, rel=1e-9)


@pytest.mark.parametrize("ar,box", [(16 / 9, (4.0, 0.8)), (3.0, (1.0, 1.0)), (0.1, (3.5, 2.5))])
def test_crop_height_side_derivation_agrees(monkeypatch, caplog, ar: float,
                                            box: tuple[float, float]) -> None:
    w, h = box
    width_side = crop_geometry(ar, 0, 0, w, h)

    # A negative tolerance forces the re-derivation from the height side
    monkeypatch.setattr(fitting, "CROP_EPSILON", -1.0)
    with caplog.at_level(logging.DEBUG, logger="slidefit.fitting"):
        height_side = crop_geometry(ar, 0, 0, w, h)

    assert "Re-deriving crop size from height" in caplog.text
    assert height_side.w == pytest.approx(width_side.w, rel=1e-9)
    assert height_side.h == pytest.approx(width_side.h, rel=1e-9)
    assert height_side.w / height_side.h == pytest.approx(ar, rel=1e-9)
    assert (height_side.sizing.w, height_side.sizing.h) == (w, h)
    assert height_side.sizing.x == pytest.approx(width_side.sizing.x, abs=1e-9)
    assert height_side.sizing.y == pytest.approx(width_side.sizing.y, abs=1e-9)


def test_width_side_derivation_is_kept_within_tolerance(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="slidefit.fitting"):
        crop_geometry(16 / 9, 0, 0, 4.0, 0.8)

    assert "Re-deriving" not in caplog.text


@pytest.mark.parametrize("w,h", [(0, 1), (1, 0), (-1, 2), (2, -0.5)])
def test_invalid_viewport(w: float, h: float) -> None:
    with pytest.raises(InvalidViewportError):
        contain_geometry(1.5, 0, 0, w, h)
    with pytest.raises(InvalidViewportError):
        crop_geometry(1.5, 0, 0, w, h)


def test_as_dict_layout() -> None:
    contain = FitResult(x=1.0, y=2.0, w=3.0, h=4.0)
    crop = crop_geometry(2.0, 0.0, 0.0, 1.0, 1.0)

    assert contain.as_dict() == {"x": 1.0, "y": 2.0, "w": 3.0, "h": 4.0}
    assert crop.as_dict()["sizing"] == {"type": "crop", "x": 0.5, "y": 0.0, "w": 1.0, "h": 1.0}


def test_fitter_uses_cached_aspect_ratio(wide_png) -> None:
    reads = []

    def read_bytes(path):
        reads.append(path)
        return path.read_bytes()

    fitter = ImageFitter(ImageMetadataCache(read_bytes=read_bytes))
    contain = fitter.fit_contain(wide_png, 6.2, 1.9, 3.5, 2.5)
    crop = fitter.fit_crop(wide_png, 0, 0, 4.0, 0.8)

    assert contain == contain_geometry(1600 / 900, 6.2, 1.9, 3.5, 2.5)
    assert crop == crop_geometry(1600 / 900, 0, 0, 4.0, 0.8)
    assert len(reads) == 1


def test_fitter_rejects_viewport_before_reading(wide_png) -> None:
    reads = []
    fitter = ImageFitter(ImageMetadataCache(read_bytes=lambda p: reads.append(p) or p.read_bytes()))

    with pytest.raises(InvalidViewportError):
        fitter.fit_crop(wide_png, 0, 0, 0, 1)
    assert reads == []


def test_fitter_propagates_missing_image(tmp_path) -> None:
    fitter = ImageFitter()

    with pytest.raises(ResourceNotFoundError):
        fitter.fit_contain(tmp_path / "nope.png", 0, 0, 1, 1)


def test_fit_dispatch(wide_png) -> None:
    fitter = ImageFitter()

    assert fitter.fit(wide_png, 0, 0, 1, 1, "crop").sizing is not None
    assert fitter.fit(wide_png, 0, 0, 1, 1).sizing is None
    with pytest.raises(ValueError, match="Unknown fit mode"):
        fitter.fit(wide_png, 0, 0, 1, 1, "stretch")
