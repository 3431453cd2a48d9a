"""
Case-Definition Rendering Module.

Turns a NormalizedModel into:
  - DOCX bytes (styled document, python-docx packager)
  - a plaintext document of column-aligned decision tables
"""

from .blocks import CategoryItem, Heading, ListItem, Paragraph, TableBlock, TextRun
from .document_builder import build_document_blocks
from .docx_renderer import render_docx, package_docx, DocxRenderResult
from .markdown_tables import render_markdown_tables
from .text_formatting import annotate_keywords, parse_section_text

__all__ = [
    "render_docx",
    "package_docx",
    "DocxRenderResult",
    "render_markdown_tables",
    "build_document_blocks",
    "annotate_keywords",
    "parse_section_text",
    "CategoryItem",
    "Heading",
    "ListItem",
    "Paragraph",
    "TableBlock",
    "TextRun",
]
