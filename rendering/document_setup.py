"""
DOCX Document Setup - page layout and styles from a StylingConfig.

All functions operate on a python-docx Document instance. Every visual
constant comes from the StylingConfig so callers can override it.
"""

import logging

from docx import Document
from docx.enum.style import WD_STYLE_TYPE
from docx.shared import Cm, Pt, RGBColor

from core.styling import StylingConfig

logger = logging.getLogger(__name__)

HEADING_STYLES = {0: 'Title', 1: 'Heading 1', 2: 'Heading 2', 3: 'Heading 3'}
LIST_STYLES = {1: 'List Bullet', 2: 'List Bullet 2'}


def _setup_styles(doc: Document, styling: StylingConfig) -> None:
    """Configure page margins, body, heading and list styles.

      - Body: body_font at body_size, spacing_before / spacing_after
      - Title + Heading 1-3: body_font, bold, heading_color, heading_sizes[level]
      - List Bullet / List Bullet 2: body font, list_spacing_before / list_spacing_after
    """
    # --- Page setup ---
    section = doc.sections[0]
    section.page_width = Cm(styling.page_width)
    section.page_height = Cm(styling.page_height)
    section.top_margin = Cm(styling.margin_top)
    section.bottom_margin = Cm(styling.margin_bottom)
    section.left_margin = Cm(styling.margin_left)
    section.right_margin = Cm(styling.margin_right)

    color = RGBColor.from_string(styling.heading_color)

    # --- Normal (body text) ---
    style = doc.styles['Normal']
    style.font.name = styling.body_font
    style.font.size = Pt(styling.body_size)
    pf = style.paragraph_format
    pf.space_before = Pt(styling.spacing_before)
    pf.space_after = Pt(styling.spacing_after)

    # --- Title and headings ---
    for level, name in HEADING_STYLES.items():
        try:
            h = doc.styles[name]
        except KeyError:
            h = doc.styles.add_style(name, WD_STYLE_TYPE.PARAGRAPH)
        h.font.name = styling.body_font
        h.font.size = Pt(styling.heading_size(level))
        h.font.bold = True
        h.font.italic = False
        h.font.color.rgb = color
        h.paragraph_format.space_before = Pt(styling.heading_spacing_before)
        h.paragraph_format.space_after = Pt(styling.spacing_after)
        h.paragraph_format.keep_with_next = True

    # --- List bullets ---
    for name in LIST_STYLES.values():
        try:
            lb = doc.styles[name]
        except KeyError:
            continue
        lb.font.name = styling.body_font
        lb.font.size = Pt(styling.body_size)
        lb.paragraph_format.space_before = Pt(styling.list_spacing_before)
        lb.paragraph_format.space_after = Pt(styling.list_spacing_after)
