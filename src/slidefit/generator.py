"""Deck session orchestration.

A `DeckSession` owns everything that must live for exactly one
document-generation run:

    1. A python-pptx Presentation sized from the theme
    2. An ImageMetadataCache and the ImageFitter built on it
    3. A CitationRegister numbering citations across the whole deck

Deck scripts create one session, add slides and content through it, and
call `save()` once at the end.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union, List

from pptx import Presentation
from pptx.util import Inches

from .citations import Citation, CitationRegister, render_citations
from .config import Config
from .fitting import ImageFitter
from .image_cache import ImageMetadataCache
from .images import add_picture
from .slide_builders import add_bar_chart, add_filled_rect, add_slide_title, add_text_box
from .theme import Theme, rgb

logger = logging.getLogger(__name__)

# Index of the "Blank" layout in the default python-pptx template
BLANK_LAYOUT_INDEX = 6


class DeckSession:
    """One deck-building run with its own image cache and citation numbering."""

    def __init__(self, config: Optional[Config] = None, theme: Optional[Theme] = None,
                 cache: Optional[ImageMetadataCache] = None):
        """Create a session.

        Args:
            config: Configuration for output path, assets directory and theme.
            theme: Explicit theme; defaults to the theme described by config.
            cache: Image metadata cache; a fresh one is created when omitted.
        """
        self.config = config
        self.theme = theme or Theme.from_config(config)
        self.cache = cache if cache is not None else ImageMetadataCache()
        self.fitter = ImageFitter(self.cache)
        self.citations = CitationRegister()

        self.prs = Presentation()
        self.prs.slide_width = Inches(self.theme.slide_width)
        self.prs.slide_height = Inches(self.theme.slide_height)
        logger.info(
            f"Started deck session ({self.theme.slide_width:.3f}\" x {self.theme.slide_height:.3f}\")"
        )

    @property
    def slide_count(self) -> int:
        return len(self.prs.slides)

    def resolve_asset(self, img_path: Union[str, Path]) -> Path:
        """Resolve a relative image path against the configured assets directory."""
        path = Path(img_path)
        if path.is_absolute() or self.config is None:
            return path
        return self.config.assets_dir / path

    def add_slide(self, background: Optional[str] = None):
        """Add a blank slide, optionally with a solid background colour."""
        slide = self.prs.slides.add_slide(self.prs.slide_layouts[BLANK_LAYOUT_INDEX])
        color = background or 'background'
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = self.theme.color(color) if color in self.theme.colors else rgb(color)
        logger.info(f"=== Slide {self.slide_count} ===")
        return slide

    def add_title(self, slide, title: str, color=None):
        return add_slide_title(slide, title, self.theme, color=color)

    def add_text(self, slide, text, left: float, top: float, width: float,
                 height: Optional[float] = None, **kwargs):
        return add_text_box(slide, text, left, top, width, height, theme=self.theme, **kwargs)

    def add_panel(self, slide, left: float, top: float, width: float, height: float,
                  fill='panel', **kwargs):
        return add_filled_rect(slide, left, top, width, height, fill, theme=self.theme, **kwargs)

    def add_chart(self, slide, categories, series, left: float, top: float,
                  width: float, height: float, **kwargs):
        return add_bar_chart(slide, categories, series, left, top, width, height,
                             theme=self.theme, **kwargs)

    def add_image(self, slide, img_path: Union[str, Path], left: float, top: float,
                  width: float, height: float, fit_mode: str = 'contain'):
        """Place an image with contain or crop fitting.

        Raises:
            ResourceNotFoundError: If the image does not exist
            UnsupportedFormatError: If the image size cannot be read
            InvalidViewportError: If width or height is not positive
        """
        return add_picture(slide, self.fitter, self.resolve_asset(img_path),
                           left, top, width, height, fit_mode=fit_mode)

    def add_citations(self, slide, urls: Sequence[str]) -> List[Citation]:
        return render_citations(slide, urls, self.citations, self.theme)

    def save(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """Write the presentation and return the path written.

        Args:
            output_path: Destination; defaults to the configured output path.
        """
        if output_path is None:
            if self.config is None:
                raise ValueError("No output path given and no config to take one from")
            output_path = self.config.output_path
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Saving presentation to {output_path}...")
        self.prs.save(str(output_path))
        logger.info("✓ Presentation saved successfully!")
        logger.info(f"  Total slides created: {self.slide_count}")
        logger.info(f"  Citations issued: {self.citations.issued}")
        return output_path
