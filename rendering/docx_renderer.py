"""
Case-Definition Document Renderer - NormalizedModel -> DOCX bytes.

Two steps:
  1. build_document_blocks() turns the model into an ordered block sequence
     (pure, see rendering/document_builder.py)
  2. package_docx() hands the blocks and a StylingConfig to python-docx and
     returns the serialized bytes

Any python-docx failure surfaces as SerializationError. There is no retry
and nothing is written anywhere; the caller gets bytes or an exception.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from docx import Document

from core.constants import DOCX_CONTENT_TYPE, SYSTEM_NAME
from core.errors import SerializationError
from core.styling import StylingConfig
from extraction.schema import NormalizedModel

from .blocks import Block, CategoryItem, Heading, ListItem, Paragraph, TableBlock, block_text
from .document_builder import build_document_blocks
from .document_setup import LIST_STYLES, _setup_styles
from .tables import _add_decision_table
from .text_formatting import _sanitize_xml_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocxRenderResult:
    """Serialized DOCX plus rendering stats."""
    content: bytes
    blocks_rendered: int = 0
    total_words: int = 0

    @property
    def content_type(self) -> str:
        return DOCX_CONTENT_TYPE


def _add_runs(paragraph, runs) -> None:
    for run in runs:
        r = paragraph.add_run(_sanitize_xml_text(run.text))
        if run.emphasized:
            r.italic = True
        if run.bold:
            r.bold = True


def _add_block(doc: Document, block: Block, styling: StylingConfig) -> None:
    if isinstance(block, Heading):
        doc.add_heading(_sanitize_xml_text(block.text), level=block.level)
    elif isinstance(block, Paragraph):
        _add_runs(doc.add_paragraph(), block.runs)
    elif isinstance(block, ListItem):
        style = LIST_STYLES.get(block.level, LIST_STYLES[2])
        _add_runs(doc.add_paragraph(style=style), block.runs)
    elif isinstance(block, CategoryItem):
        p = doc.add_paragraph()
        label = p.add_run(f"{block.letter}. ")
        label.bold = True
        p.add_run(_sanitize_xml_text(block.description))
    elif isinstance(block, TableBlock):
        if _add_decision_table(doc, block, styling):
            doc.add_paragraph()
    else:
        raise TypeError(f"Unsupported block type: {type(block).__name__}")


def package_docx(blocks: Sequence[Block], styling: Optional[StylingConfig] = None,
                 title: str = "") -> bytes:
    """Serialize a block sequence to DOCX bytes with python-docx.

    Raises:
        SerializationError: python-docx failed to build or save the document
    """
    styling = styling or StylingConfig()
    try:
        doc = Document()
        _setup_styles(doc, styling)
        doc.core_properties.author = SYSTEM_NAME
        if title:
            doc.core_properties.title = title

        for block in blocks:
            _add_block(doc, block, styling)

        buf = io.BytesIO()
        doc.save(buf)
        return buf.getvalue()
    except Exception as e:
        logger.error(f"DOCX serialization failed: {e}")
        raise SerializationError(f"DOCX serialization failed: {e}", cause=e) from e


def render_docx(model: NormalizedModel, styling: Optional[StylingConfig] = None,
                include_decision_tables: bool = False) -> DocxRenderResult:
    """
    Render a NormalizedModel as a DOCX document.

    Args:
        model: Assembled case-definition model
        styling: Visual overrides (defaults: blue 0070C0 headings, Calibri body)
        include_decision_tables: Append every decision table as a grid

    Returns:
        DocxRenderResult with the document bytes and stats
    """
    blocks = build_document_blocks(model, include_decision_tables=include_decision_tables)
    content = package_docx(blocks, styling, title=model.metadata.title or "")
    total_words = sum(len(block_text(b).split()) for b in blocks)

    logger.info(f"DOCX rendered: {len(blocks)} blocks, {total_words} words, {len(content)} bytes")
    return DocxRenderResult(
        content=content,
        blocks_rendered=len(blocks),
        total_words=total_words,
    )
