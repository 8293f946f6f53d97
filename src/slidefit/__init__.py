"""slidefit: image fitting and citation numbering for PowerPoint decks."""

from .errors import (
    SlideFitError,
    ResourceNotFoundError,
    UnsupportedFormatError,
    InvalidViewportError,
)
from .image_cache import (
    ImageDimensions,
    ImageMetadataCache,
)
from .fitting import (
    CropWindow,
    FitResult,
    ImageFitter,
    contain_geometry,
    crop_geometry,
)
from .text_metrics import (
    POINTS_PER_INCH,
    block_height,
)
from .citations import (
    Citation,
    CitationRegister,
    render_citations,
)
from .config import Config
from .theme import Theme
from .images import (
    add_picture,
    add_picture_contain,
    add_picture_crop,
)
from .slide_builders import (
    add_slide_title,
    add_text_box,
    add_filled_rect,
    add_bar_chart,
)
from .generator import DeckSession

__all__ = [
    # Errors
    "SlideFitError",
    "ResourceNotFoundError",
    "UnsupportedFormatError",
    "InvalidViewportError",
    # Image metadata
    "ImageDimensions",
    "ImageMetadataCache",
    # Fitting
    "CropWindow",
    "FitResult",
    "ImageFitter",
    "contain_geometry",
    "crop_geometry",
    # Text metrics
    "POINTS_PER_INCH",
    "block_height",
    # Citations
    "Citation",
    "CitationRegister",
    "render_citations",
    # Configuration and theme
    "Config",
    "Theme",
    # Slide drawing
    "add_picture",
    "add_picture_contain",
    "add_picture_crop",
    "add_slide_title",
    "add_text_box",
    "add_filled_rect",
    "add_bar_chart",
    # Session
    "DeckSession",
]
