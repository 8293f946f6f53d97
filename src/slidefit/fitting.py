"""Aspect-ratio preserving box fitting for images.

Two modes are supported:

* contain: scale the image to sit entirely inside the viewport, centered,
  leaving an empty margin on one axis when the aspect ratios differ.
* crop: scale the image to cover the whole viewport and hide the minimal
  symmetric excess on one axis.

All coordinates are in inches. The pure `*_geometry` functions take an
aspect ratio directly; `ImageFitter` looks the ratio up through an
`ImageMetadataCache`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .errors import InvalidViewportError
from .image_cache import ImageMetadataCache

logger = logging.getLogger(__name__)

# Tolerance for reconciling the two virtual-size derivations in crop mode
CROP_EPSILON = 1e-6

FIT_MODES = ('contain', 'crop')


@dataclass(frozen=True)
class CropWindow:
    """Visible region of a cropped image, in virtual (pre-crop) units."""
    x: float
    y: float
    w: float
    h: float
    type: str = 'crop'


@dataclass(frozen=True)
class FitResult:
    """Placement geometry produced by a fitting call.

    For contain mode `x, y, w, h` is the visible rectangle and `sizing` is
    None. For crop mode `x, y` is the viewport origin, `w, h` is the virtual
    size of the whole image and `sizing` is the window left visible.
    """
    x: float
    y: float
    w: float
    h: float
    sizing: Optional[CropWindow] = None

    def as_dict(self) -> Dict[str, Any]:
        """Return the geometry as an option mapping."""
        result: Dict[str, Any] = {'x': self.x, 'y': self.y, 'w': self.w, 'h': self.h}
        if self.sizing is not None:
            result['sizing'] = {
                'type': self.sizing.type,
                'x': self.sizing.x,
                'y': self.sizing.y,
                'w': self.sizing.w,
                'h': self.sizing.h,
            }
        return result

    def crop_fractions(self) -> Tuple[float, float, float, float]:
        """Return the hidden (left, top, right, bottom) fractions of the image.

        Contain results hide nothing and return all zeros.
        """
        if self.sizing is None:
            return 0.0, 0.0, 0.0, 0.0
        s = self.sizing
        left = s.x / self.w
        top = s.y / self.h
        right = max(0.0, 1 - (s.x + s.w) / self.w)
        bottom = max(0.0, 1 - (s.y + s.h) / self.h)
        return left, top, right, bottom


def _check_viewport(w: float, h: float) -> None:
    if w <= 0 or h <= 0:
        raise InvalidViewportError(w, h)


def contain_geometry(aspect_ratio: float, x: float, y: float,
                     w: float, h: float) -> FitResult:
    """Fit an image of the given aspect ratio inside a viewport.

    The result preserves the aspect ratio, touches the viewport on at
    least one axis and is centered on both.

    Raises:
        InvalidViewportError: If w or h is not positive
    """
    _check_viewport(w, h)
    box_aspect = w / h

    if aspect_ratio >= box_aspect:
        # Image is wider - constrain by width
        out_w = w
        out_h = w / aspect_ratio
    else:
        # Image is taller - constrain by height
        out_h = h
        out_w = h * aspect_ratio

    return FitResult(
        x=x + (w - out_w) / 2,
        y=y + (h - out_h) / 2,
        w=out_w,
        h=out_h,
    )


def crop_geometry(aspect_ratio: float, x: float, y: float,
                  w: float, h: float) -> FitResult:
    """Cover a viewport with an image of the given aspect ratio.

    Computes the normalized visible sub-rectangle of the source, then the
    virtual size the whole image must have so that the visible part is
    exactly `w` x `h`.

    Raises:
        InvalidViewportError: If w or h is not positive
    """
    _check_viewport(w, h)
    box_aspect = w / h

    if aspect_ratio >= box_aspect:
        # Crop left and right
        cw = box_aspect / aspect_ratio
        ch = 1.0
        cx = (1 - cw) / 2
        cy = 0.0
    else:
        # Crop top and bottom
        cw = 1.0
        ch = aspect_ratio / box_aspect
        cx = 0.0
        cy = (1 - ch) / 2

    virtual_w = w / cw
    virtual_h = virtual_w / aspect_ratio
    # The width- and height-side formulas are equal algebraically but not
    # always in floating point.
    if abs(virtual_h * ch - h) > CROP_EPSILON:
        logger.debug(f"Re-deriving crop size from height (ratio {aspect_ratio}, box {w}x{h})")
        virtual_h = h / ch
        virtual_w = virtual_h * aspect_ratio

    return FitResult(
        x=x,
        y=y,
        w=virtual_w,
        h=virtual_h,
        sizing=CropWindow(x=cx * virtual_w, y=cy * virtual_h, w=w, h=h),
    )


class ImageFitter:
    """Computes image placement geometry using cached image dimensions."""

    def __init__(self, cache: Optional[ImageMetadataCache] = None):
        self.cache = cache if cache is not None else ImageMetadataCache()

    def fit_contain(self, path: Union[str, Path], x: float, y: float,
                    w: float, h: float) -> FitResult:
        """Fit the whole image at `path` inside the viewport.

        Raises:
            InvalidViewportError: If w or h is not positive
            ResourceNotFoundError: If the image does not exist
            UnsupportedFormatError: If the image size cannot be read
        """
        _check_viewport(w, h)
        aspect_ratio = self.cache.dimensions_of(path).aspect_ratio
        result = contain_geometry(aspect_ratio, x, y, w, h)
        logger.debug(f"contain {path}: ({result.x:.3f}, {result.y:.3f}) {result.w:.3f}x{result.h:.3f}")
        return result

    def fit_crop(self, path: Union[str, Path], x: float, y: float,
                 w: float, h: float) -> FitResult:
        """Fill the viewport with the image at `path`, cropping the excess.

        Raises:
            InvalidViewportError: If w or h is not positive
            ResourceNotFoundError: If the image does not exist
            UnsupportedFormatError: If the image size cannot be read
        """
        _check_viewport(w, h)
        aspect_ratio = self.cache.dimensions_of(path).aspect_ratio
        result = crop_geometry(aspect_ratio, x, y, w, h)
        logger.debug(f"crop {path}: virtual {result.w:.3f}x{result.h:.3f}, window {result.sizing}")
        return result

    def fit(self, path: Union[str, Path], x: float, y: float,
            w: float, h: float, fit_mode: str = 'contain') -> FitResult:
        """Dispatch to `fit_contain` or `fit_crop` by mode name."""
        if fit_mode == 'contain':
            return self.fit_contain(path, x, y, w, h)
        if fit_mode == 'crop':
            return self.fit_crop(path, x, y, w, h)
        raise ValueError(f"Unknown fit mode '{fit_mode}'. Expected one of: {', '.join(FIT_MODES)}")
