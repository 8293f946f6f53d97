"""Inline markdown-style formatting and bullets for PowerPoint paragraphs."""

import re
from typing import List, NamedTuple, Optional, TYPE_CHECKING

from pptx.oxml.xmlchemy import OxmlElement

if TYPE_CHECKING:
    from pptx.dml.color import RGBColor
    from pptx.text.text import _Paragraph
    from pptx.util import Length

BULLET_CHAR = '•'

# Matches [text](url) links, ***text*** (bold+italic), **text** (bold), or *text* (italic)
_INLINE_PATTERN = re.compile(r'(\[.*?\]\(.*?\)|\*\*\*.*?\*\*\*|\*\*.*?\*\*|\*.*?\*)')
_LINK_PATTERN = re.compile(r'\[(.*?)\]\((.*?)\)')


class TextSpan(NamedTuple):
    """A run of text with uniform formatting."""
    text: str
    bold: bool = False
    italic: bool = False
    url: Optional[str] = None


def parse_inline(text: str) -> List[TextSpan]:
    """Split text into formatted spans.

    Supports **bold**, *italic*, ***bold+italic*** and [text](url).
    """
    spans = []
    for part in _INLINE_PATTERN.split(text):
        if not part:
            continue
        link = _LINK_PATTERN.fullmatch(part)
        if link:
            spans.append(TextSpan(link.group(1), url=link.group(2)))
        elif part.startswith('***') and part.endswith('***') and len(part) > 6:
            spans.append(TextSpan(part[3:-3], bold=True, italic=True))
        elif part.startswith('**') and part.endswith('**') and len(part) > 4:
            spans.append(TextSpan(part[2:-2], bold=True))
        elif part.startswith('*') and part.endswith('*') and len(part) > 2:
            spans.append(TextSpan(part[1:-1], italic=True))
        else:
            spans.append(TextSpan(part))
    return spans


def add_formatted_text(paragraph: '_Paragraph', text: str,
                       link_color: Optional['RGBColor'] = None) -> None:
    """Replace a paragraph's text with formatted runs parsed from `text`.

    Args:
        paragraph: PowerPoint paragraph object
        text: Text with inline markdown formatting
        link_color: Optional colour for hyperlink runs
    """
    paragraph.text = ""

    for span in parse_inline(text):
        run = paragraph.add_run()
        run.text = span.text
        if span.bold:
            run.font.bold = True
        if span.italic:
            run.font.italic = True
        if span.url:
            run.hyperlink.address = span.url
            run.font.underline = True
            if link_color is not None:
                run.font.color.rgb = link_color


def add_bullet(paragraph: '_Paragraph', indent: 'Length', level: int = 0) -> None:
    """Give a paragraph a bullet with a hanging indent.

    Args:
        paragraph: PowerPoint paragraph object
        indent: Distance between the bullet and the text (EMU length)
        level: Nesting level; each level shifts the text by one indent
    """
    pPr = paragraph._element.get_or_add_pPr()
    pPr.set('marL', str(int(indent) * (level + 1)))
    pPr.set('indent', str(-int(indent)))

    buChar = OxmlElement('a:buChar')
    buChar.set('char', BULLET_CHAR)
    pPr.insert(0, buChar)


def remove_bullet(paragraph: '_Paragraph') -> None:
    """Remove bullet formatting and reset the paragraph margins to zero."""
    pPr = paragraph._element.get_or_add_pPr()
    pPr.set('marL', '0')
    pPr.set('indent', '0')
    pPr.insert(0, OxmlElement('a:buNone'))
