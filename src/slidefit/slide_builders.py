"""Slide drawing helpers.

This module provides the small drawing vocabulary deck scripts are built
from: slide titles, text boxes sized from their font, filled panels and
category charts. Positions and sizes are in inches, font sizes in points.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Union

from pptx.chart.data import CategoryChartData
from pptx.enum.chart import XL_CHART_TYPE, XL_LEGEND_POSITION
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from .rich_text import add_bullet, add_formatted_text, remove_bullet
from .text_metrics import block_height
from .theme import Theme, rgb

if TYPE_CHECKING:
    from pptx.dml.color import RGBColor
    from pptx.shapes.autoshape import Shape
    from pptx.shapes.graphfrm import GraphicFrame
    from pptx.slide import Slide
    from pptx.text.text import _Paragraph

logger = logging.getLogger(__name__)

_ALIGN = {
    'left': PP_ALIGN.LEFT,
    'center': PP_ALIGN.CENTER,
    'right': PP_ALIGN.RIGHT,
    'justify': PP_ALIGN.JUSTIFY,
}

_VALIGN = {
    'top': MSO_ANCHOR.TOP,
    'middle': MSO_ANCHOR.MIDDLE,
    'bottom': MSO_ANCHOR.BOTTOM,
}


def _resolve_color(color: Union[str, "RGBColor", None], theme: Theme,
                   default: str) -> "RGBColor":
    """Accept a theme colour name, an 'RRGGBB' string or an RGBColor."""
    if color is None:
        return theme.color(default)
    if isinstance(color, str):
        if color in theme.colors:
            return theme.color(color)
        return rgb(color)
    return color


def _style_runs(paragraph: "_Paragraph", theme: Theme, size: float,
                color: "RGBColor", bold: bool, italic: bool) -> None:
    for run in paragraph.runs:
        font = run.font
        font.name = theme.font_face
        font.size = Pt(size)
        if bold:
            font.bold = True
        if italic:
            font.italic = True
        # Hyperlink runs keep their own colour
        if run.hyperlink.address is None:
            font.color.rgb = color


def add_text_box(
    slide: "Slide",
    text: Union[str, Sequence[str]],
    left: float,
    top: float,
    width: float,
    height: Optional[float] = None,
    *,
    theme: Theme,
    font_size: Optional[float] = None,
    lines: Optional[int] = None,
    color: Union[str, "RGBColor", None] = None,
    bold: bool = False,
    italic: bool = False,
    align: str = 'left',
    valign: str = 'top',
    bullets: bool = False,
) -> "Shape":
    """Add a text box with one paragraph per string.

    When `height` is omitted it is estimated from the font size and the
    number of lines (which defaults to the number of paragraphs).

    Args:
        slide: Slide to draw on.
        text: A string or a sequence of paragraph strings. Inline
            **bold**, *italic* and [text](url) markup is honoured.
        left, top, width: Box position and width in inches.
        height: Box height in inches.
        theme: Deck theme for font face and colours.
        font_size: Font size in points (defaults to the theme's text size).
        lines: Line count used for the height estimate.
        color: Theme colour name, 'RRGGBB' string or RGBColor.
        bold, italic: Apply to every run.
        align: 'left', 'center', 'right' or 'justify'.
        valign: 'top', 'middle' or 'bottom'.
        bullets: Prefix each paragraph with a bullet.

    Returns:
        The created text box shape.
    """
    paragraphs = [text] if isinstance(text, str) else list(text)
    size = font_size if font_size is not None else theme.font_size['text']
    if height is None:
        height = block_height(size, lines or max(len(paragraphs), 1))

    box = slide.shapes.add_textbox(Inches(left), Inches(top), Inches(width), Inches(height))
    text_frame = box.text_frame
    text_frame.word_wrap = True
    text_frame.vertical_anchor = _VALIGN[valign]
    run_color = _resolve_color(color, theme, 'text')

    for i, content in enumerate(paragraphs):
        paragraph = text_frame.paragraphs[0] if i == 0 else text_frame.add_paragraph()
        add_formatted_text(paragraph, content, link_color=theme.color('citation'))
        paragraph.alignment = _ALIGN[align]
        if bullets:
            add_bullet(paragraph, theme.bullet_indent)
        else:
            remove_bullet(paragraph)
        _style_runs(paragraph, theme, size, run_color, bold, italic)

    logger.debug(f"Added text box at ({left}, {top}) {width}x{height:.3f} with {len(paragraphs)} paragraph(s)")
    return box


def add_slide_title(slide: "Slide", title: str, theme: Theme,
                    color: Union[str, "RGBColor", None] = None) -> "Shape":
    """Add a slide title at the theme's title position."""
    box = add_text_box(
        slide,
        title,
        theme.title_x,
        theme.title_y,
        theme.title_width,
        theme.slide_title_height,
        theme=theme,
        font_size=theme.font_size['slide_title'],
        color=color,
    )
    box.name = "Title"
    logger.info(f"Added slide title: '{title[:60]}{'...' if len(title) > 60 else ''}'")
    return box


def add_filled_rect(
    slide: "Slide",
    left: float,
    top: float,
    width: float,
    height: float,
    fill: Union[str, "RGBColor"],
    *,
    theme: Theme,
    line: Union[str, "RGBColor", None] = None,
    line_width: float = 0.75,
    rounded: bool = False,
) -> "Shape":
    """Add a solid-filled rectangle, outlined only when `line` is given."""
    shape_type = MSO_SHAPE.ROUNDED_RECTANGLE if rounded else MSO_SHAPE.RECTANGLE
    shape = slide.shapes.add_shape(
        shape_type, Inches(left), Inches(top), Inches(width), Inches(height)
    )
    shape.fill.solid()
    shape.fill.fore_color.rgb = _resolve_color(fill, theme, 'panel')

    if line is None:
        shape.line.fill.background()
    else:
        shape.line.color.rgb = _resolve_color(line, theme, 'text')
        shape.line.width = Pt(line_width)

    logger.debug(f"Added rectangle at ({left}, {top}) {width}x{height}")
    return shape


def add_bar_chart(
    slide: "Slide",
    categories: Sequence[str],
    series: Dict[str, Sequence[float]],
    left: float,
    top: float,
    width: float,
    height: float,
    *,
    theme: Theme,
    chart_type: XL_CHART_TYPE = XL_CHART_TYPE.COLUMN_CLUSTERED,
    series_colors: Optional[Sequence[Union[str, "RGBColor"]]] = None,
    legend: bool = True,
) -> "GraphicFrame":
    """Add a category chart with one or more numeric series.

    Args:
        categories: Category axis labels.
        series: Mapping of series name to one value per category.
        series_colors: Optional fill colour per series, in order.
        legend: Show a bottom legend when there is more than one series.

    Raises:
        ValueError: If a series length does not match the category count.
    """
    chart_data = CategoryChartData()
    chart_data.categories = list(categories)
    for name, values in series.items():
        if len(values) != len(categories):
            raise ValueError(
                f"Series '{name}' has {len(values)} values for {len(categories)} categories"
            )
        chart_data.add_series(name, list(values))

    frame = slide.shapes.add_chart(
        chart_type, Inches(left), Inches(top), Inches(width), Inches(height), chart_data
    )
    chart = frame.chart
    chart.font.name = theme.font_face
    chart.font.size = Pt(theme.font_size['detail'])

    if series_colors:
        for plot_series, color in zip(chart.plots[0].series, series_colors):
            plot_series.format.fill.solid()
            plot_series.format.fill.fore_color.rgb = _resolve_color(color, theme, 'highlight')

    chart.has_legend = legend and len(series) > 1
    if chart.has_legend:
        chart.legend.position = XL_LEGEND_POSITION.BOTTOM
        chart.legend.include_in_layout = False

    logger.info(f"Added chart with {len(series)} series over {len(categories)} categories")
    return frame
