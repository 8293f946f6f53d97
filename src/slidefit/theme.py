"""Deck theme: slide size, fonts, colours and margins.

Defaults describe a 16:9 deck 5.625 inches tall with a light background.
Any value can be overridden from the `theme` section of the config:

    theme:
      slide_height: 7.5
      font_face: Calibri
      font_size:
        text: 14
      colors:
        citation: "1F2937"
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Dict, Optional

from pptx.dml.color import RGBColor
from pptx.util import Pt

from .text_metrics import block_height

if TYPE_CHECKING:
    from .config import Config

DEFAULT_FONT_SIZES: Dict[str, int] = {
    'presentation_title': 36,
    'presentation_subtitle': 12,
    'slide_title': 24,
    'date': 12,
    'section_title': 16,
    'text': 12,
    'detail': 8,
    'placeholder': 10,
    'citation': 6,
    'subheader': 21,
}

DEFAULT_COLORS: Dict[str, str] = {
    'background': 'FFFFFF',
    'text': '000000',
    'citation': '030A18',   # near-black navy
    'panel': 'F5F5F5',      # light gray
    'highlight': '97B1DF',  # greyish blue
    'accent': 'A4B6B8',     # light green
}


def rgb(hex_color: str) -> RGBColor:
    """Convert an 'RRGGBB' string (with or without '#') to RGBColor."""
    return RGBColor.from_string(hex_color.lstrip('#').upper())


@dataclass
class Theme:
    """Visual constants shared by every slide of a deck (inches and points)."""
    slide_height: float = 5.625
    slide_width: Optional[float] = None  # derived as 16:9 when unset
    font_face: str = 'Arial'
    font_size: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_FONT_SIZES))
    colors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    title_x: float = 0.3
    title_y: float = 0.3
    title_width_ratio: float = 0.94
    bullet_indent_pt: float = 15
    padding_bottom: float = 0.23
    citation_gap: float = 0.15

    def __post_init__(self):
        if self.slide_width is None:
            self.slide_width = self.slide_height / 9 * 16

    @property
    def title_width(self) -> float:
        return self.slide_width * self.title_width_ratio

    @property
    def slide_title_height(self) -> float:
        return block_height(self.font_size['slide_title'])

    @property
    def citation_height(self) -> float:
        return block_height(self.font_size['citation'])

    @property
    def citation_top(self) -> float:
        return self.slide_height - self.citation_height - self.citation_gap

    @property
    def bullet_indent(self) -> Pt:
        return Pt(self.bullet_indent_pt)

    def color(self, name: str) -> RGBColor:
        """Look up a named theme colour."""
        try:
            return rgb(self.colors[name])
        except KeyError:
            raise KeyError(f"Unknown theme color '{name}'. Available: {', '.join(self.colors)}") from None

    @classmethod
    def from_config(cls, config: Optional["Config"]) -> "Theme":
        """Build a theme from the `theme` section of a config."""
        if config is None:
            return cls()

        section: Dict[str, Any] = config.get('theme', {}) or {}
        scalar_fields = {f.name for f in fields(cls)} - {'font_size', 'colors'}
        overrides = {k: v for k, v in section.items() if k in scalar_fields}

        font_size = dict(DEFAULT_FONT_SIZES)
        font_size.update(section.get('font_size', {}) or {})
        colors = dict(DEFAULT_COLORS)
        colors.update({k: str(v) for k, v in (section.get('colors', {}) or {}).items()})

        return cls(font_size=font_size, colors=colors, **overrides)
