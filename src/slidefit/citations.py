"""Document-wide citation numbering.

A `CitationRegister` is created once per deck-building session and passed to
every call that emits citations, so numbering runs 1, 2, 3, ... across the
whole document rather than restarting on each slide.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List

from pptx.util import Inches, Pt

if TYPE_CHECKING:
    from pptx.slide import Slide
    from .theme import Theme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Citation:
    """A numbered reference link."""
    number: int
    url: str

    @property
    def label(self) -> str:
        return f"[{self.number}]"


class CitationRegister:
    """Monotonic citation counter shared by all slides of one session."""

    def __init__(self, start: int = 1):
        self._next = start
        self._start = start
        self._lock = threading.Lock()

    @property
    def next_number(self) -> int:
        """Number the next citation will receive."""
        return self._next

    @property
    def issued(self) -> int:
        """Count of citations assigned so far."""
        return self._next - self._start

    def assign(self, urls: Iterable[str]) -> List[Citation]:
        """Number a batch of URLs in order.

        The whole batch is numbered under one lock, so the labels of a single
        call are always contiguous.

        Raises:
            TypeError: If `urls` is a single string rather than a sequence
        """
        if isinstance(urls, str):
            raise TypeError("urls must be a sequence of strings, not a single string")
        urls = list(urls)
        with self._lock:
            first = self._next
            self._next += len(urls)
        return [Citation(number=first + i, url=url) for i, url in enumerate(urls)]


def render_citations(slide: "Slide", urls: Iterable[str],
                     register: CitationRegister, theme: "Theme") -> List[Citation]:
    """Add bracketed, hyperlinked citation numbers to the bottom of a slide.

    All citations of the call go into a single text box, one run each.

    Args:
        slide: Slide to draw on
        urls: Reference URLs in display order (not validated)
        register: Session citation register
        theme: Theme supplying position, font size and colour

    Returns:
        The citations emitted, in order
    """
    citations = register.assign(urls)
    if not citations:
        return citations

    box = slide.shapes.add_textbox(
        Inches(theme.title_x),
        Inches(theme.citation_top),
        Inches(theme.title_width),
        Inches(theme.citation_height),
    )
    box.name = "Citations"
    paragraph = box.text_frame.paragraphs[0]
    color = theme.color('citation')
    size = Pt(theme.font_size['citation'])

    for citation in citations:
        run = paragraph.add_run()
        run.text = citation.label
        run.hyperlink.address = citation.url
        run.font.size = size
        run.font.color.rgb = color

    logger.info(f"Added citations {citations[0].label}-{citations[-1].label}")
    return citations
