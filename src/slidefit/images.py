"""Image placement on PowerPoint slides.

Pictures are positioned with geometry from `ImageFitter`. Contain mode
shrinks the picture to sit inside the target area; crop mode makes the
picture occupy the target area exactly and hides the overflow with the
picture's crop properties, so the image is never stretched.

A missing or unreadable image raises instead of being skipped; the caller
decides whether to abort or use a placeholder asset.
"""

import logging
from pathlib import Path
from typing import Union, TYPE_CHECKING

from pptx.util import Inches

from .fitting import FitResult, ImageFitter

if TYPE_CHECKING:
    from pptx.slide import Slide
    from pptx.shapes.picture import Picture

logger = logging.getLogger(__name__)


def add_picture_contain(slide: 'Slide', fitter: ImageFitter, img_path: Union[str, Path],
                        left: float, top: float, width: float, height: float) -> 'Picture':
    """Add an image scaled to fit entirely within the target area.

    Args:
        slide: PowerPoint slide object
        fitter: ImageFitter used to read the image aspect ratio
        img_path: Path to the image file
        left, top, width, height: Target area in inches

    Returns:
        The added Picture shape
    """
    fit = fitter.fit_contain(img_path, left, top, width, height)
    picture = slide.shapes.add_picture(
        str(img_path),
        Inches(fit.x),
        Inches(fit.y),
        width=Inches(fit.w),
        height=Inches(fit.h)
    )
    logger.info(f"Added image {img_path} to area ({left}, {top}) {width}x{height} [mode=contain]")
    return picture


def add_picture_crop(slide: 'Slide', fitter: ImageFitter, img_path: Union[str, Path],
                     left: float, top: float, width: float, height: float) -> 'Picture':
    """Add an image that fills the target area, cropping the excess.

    Args:
        slide: PowerPoint slide object
        fitter: ImageFitter used to read the image aspect ratio
        img_path: Path to the image file
        left, top, width, height: Target area in inches

    Returns:
        The added Picture shape
    """
    fit = fitter.fit_crop(img_path, left, top, width, height)
    window = fit.sizing
    picture = slide.shapes.add_picture(
        str(img_path),
        Inches(fit.x),
        Inches(fit.y),
        width=Inches(window.w),
        height=Inches(window.h)
    )
    apply_crop(picture, fit)
    logger.info(f"Added image {img_path} to area ({left}, {top}) {width}x{height} [mode=crop]")
    return picture


def apply_crop(picture: 'Picture', fit: FitResult) -> None:
    """Set a picture's crop properties from a crop-mode FitResult."""
    crop_left, crop_top, crop_right, crop_bottom = fit.crop_fractions()
    picture.crop_left = crop_left
    picture.crop_top = crop_top
    picture.crop_right = crop_right
    picture.crop_bottom = crop_bottom
    logger.debug(
        f"  crop l={crop_left:.4f} t={crop_top:.4f} r={crop_right:.4f} b={crop_bottom:.4f}"
    )


def add_picture(slide: 'Slide', fitter: ImageFitter, img_path: Union[str, Path],
                left: float, top: float, width: float, height: float,
                fit_mode: str = 'contain') -> 'Picture':
    """Add an image to a target area using the named fit mode.

    Args:
        fit_mode: 'contain' (fit within, preserve aspect) or 'crop' (fill, crop excess)

    Raises:
        ValueError: If fit_mode is not recognised
    """
    if fit_mode == 'contain':
        return add_picture_contain(slide, fitter, img_path, left, top, width, height)
    if fit_mode == 'crop':
        return add_picture_crop(slide, fitter, img_path, left, top, width, height)
    raise ValueError(f"Unknown fit mode '{fit_mode}'. Expected 'contain' or 'crop'")
