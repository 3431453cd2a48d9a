"""
DOCX decision-table renderer.

Renders a TableBlock as a bordered grid with a shaded, repeating header row.
"""

import logging

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt

from core.styling import StylingConfig

from .blocks import TableBlock
from .text_formatting import _sanitize_xml_text

logger = logging.getLogger(__name__)


def _shade_cell(cell, hex_color: str):
    """Apply background shading to a table cell."""
    tc_pr = cell._tc.get_or_add_tcPr()
    shading = tc_pr.makeelement(qn('w:shd'), {
        qn('w:val'): 'clear',
        qn('w:color'): 'auto',
        qn('w:fill'): hex_color,
    })
    tc_pr.append(shading)


def _mark_row_as_header(row):
    """Mark a table row to repeat on every page (DOCX tblHeader)."""
    tr_pr = row._tr.get_or_add_trPr()
    header = tr_pr.makeelement(qn('w:tblHeader'), {})
    tr_pr.append(header)


def _style_header_cell(cell, text: str, styling: StylingConfig):
    """Write text into a header cell: bold, centered, shaded."""
    cell.text = ''
    p = cell.paragraphs[0]
    run = p.add_run(_sanitize_xml_text(text))
    run.bold = True
    run.font.size = Pt(styling.body_size)
    p.alignment = WD_ALIGN_PARAGRAPH.CENTER
    p.paragraph_format.space_before = Pt(styling.table_cell_spacing)
    p.paragraph_format.space_after = Pt(styling.table_cell_spacing)
    _shade_cell(cell, styling.table_header_fill)


def _add_decision_table(doc: Document, block: TableBlock, styling: StylingConfig) -> bool:
    """Add a decision table to the document.

    Returns True if the table was added, False if it has no columns.
    """
    cols = len(block.headers)
    if cols == 0:
        return False

    table = doc.add_table(rows=1 + len(block.rows), cols=cols)
    table.style = 'Table Grid'
    table.alignment = WD_TABLE_ALIGNMENT.CENTER

    for ci, header_text in enumerate(block.headers):
        _style_header_cell(table.rows[0].cells[ci], header_text, styling)
    _mark_row_as_header(table.rows[0])

    for ri, row in enumerate(block.rows, 1):
        for ci, value in enumerate(row[:cols]):
            cell = table.rows[ri].cells[ci]
            cell.text = ''
            p = cell.paragraphs[0]
            p.add_run(_sanitize_xml_text(value))
            p.paragraph_format.space_before = Pt(styling.table_cell_spacing)
            p.paragraph_format.space_after = Pt(styling.table_cell_spacing)

    logger.debug(f"  Decision table '{block.title}': {len(block.rows)} rows x {cols} cols")
    return True
