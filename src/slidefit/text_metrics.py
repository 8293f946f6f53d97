"""Text box height estimation."""

# Font sizes are in points; layout coordinates are in inches.
POINTS_PER_INCH = 72


def block_height(font_size: float, lines: int = 1,
                 leading: float = 1.2, padding: float = 0.15) -> float:
    """Estimate the height in inches of a text box.

    Args:
        font_size: Font size in points
        lines: Number of text lines the box must hold
        leading: Line height as a multiple of the font size
        padding: Extra vertical space in inches for the box insets

    Returns:
        Box height in inches
    """
    line_height = (font_size / POINTS_PER_INCH) * leading
    return lines * line_height + padding
