"""
Tests for rendering.docx_renderer - DOCX packaging via python-docx.

Rendered bytes are read back with python-docx; the archive itself is not
compared byte for byte (zip timestamps differ between runs).
"""

import io

import pytest
from docx import Document
from docx.shared import Pt, RGBColor

from core.constants import DOCX_CONTENT_TYPE
from core.errors import ConversionError, SerializationError
from core.styling import StylingConfig
from extraction.schema import Metadata, NormalizedModel
from rendering.blocks import CategoryItem, Heading, ListItem, Paragraph, TableBlock, TextRun
from rendering.docx_renderer import package_docx, render_docx


def _read(content: bytes):
    return Document(io.BytesIO(content))


def _texts(content: bytes):
    return [p.text for p in _read(content).paragraphs if p.text]


def _cm(*lengths):
    """Lengths in cm; section sizes are stored in twips so compare rounded."""
    return tuple(round(length.cm, 2) for length in lengths)


# ── render_docx ──────────────────────────────────────────────────────

class TestRenderDocx:

    def test_returns_docx_bytes(self, sample_model):
        result = render_docx(sample_model)
        assert result.content[:2] == b"PK"
        assert result.content_type == DOCX_CONTENT_TYPE
        assert result.blocks_rendered > 0
        assert result.total_words > 0

    def test_text_stable_across_renders(self, sample_model):
        assert _texts(render_docx(sample_model).content) == _texts(render_docx(sample_model).content)

    def test_paragraph_content(self, sample_model):
        texts = _texts(render_docx(sample_model).content)
        assert texts[0] == "Campylobacter-Enteritis (Campylobacter spp.)"
        assert "Fieber (über 38,5 °C)" in texts
        assert "ODER krankheitsbedingter Tod" in texts
        assert "A. Klinisch diagnostizierte Erkrankung" in texts
        assert texts.index("Gesetzliche Grundlage") < texts.index("Meldepflicht")

    def test_styles(self, sample_model):
        doc = _read(render_docx(sample_model).content)
        by_text = {p.text: p for p in doc.paragraphs}
        assert by_text["Klinisches Bild"].style.name == "Heading 1"
        assert by_text["Meldepflicht"].style.name == "Heading 2"
        assert by_text["Fieber (über 38,5 °C)"].style.name == "List Bullet"

    def test_keyword_runs_italic(self, sample_model):
        doc = _read(render_docx(sample_model).content)
        closing = next(p for p in doc.paragraphs if p.text == "ODER krankheitsbedingter Tod")
        assert closing.runs[0].text == "ODER"
        assert closing.runs[0].italic is True
        assert not closing.runs[1].italic

    def test_default_heading_color(self, sample_model):
        doc = _read(render_docx(sample_model).content)
        assert doc.styles["Heading 1"].font.color.rgb == RGBColor.from_string("0070C0")

    def test_heading_color_override(self, sample_model):
        styling = StylingConfig.from_dict({"headingColor": "#c00000"})
        doc = _read(render_docx(sample_model, styling).content)
        assert doc.styles["Heading 1"].font.color.rgb == RGBColor.from_string("C00000")

    def test_default_page_layout(self, sample_model):
        section = _read(render_docx(sample_model).content).sections[0]
        assert _cm(section.page_width, section.page_height) == (21.0, 29.7)
        assert _cm(section.top_margin, section.bottom_margin) == (2.5, 2.0)

    def test_layout_override(self, sample_model):
        styling = StylingConfig.from_dict({
            "pageWidth": 21.59, "marginLeft": 3, "marginRight": "1.5",
            "headingSpacingBefore": 18, "listSpacingAfter": 1, "tableCellSpacing": 2,
        })
        doc = _read(render_docx(sample_model, styling, include_decision_tables=True).content)
        section = doc.sections[0]
        assert _cm(section.page_width) == (21.59,)
        assert _cm(section.left_margin, section.right_margin) == (3.0, 1.5)
        assert doc.styles["Heading 1"].paragraph_format.space_before == Pt(18)
        assert doc.styles["List Bullet"].paragraph_format.space_after == Pt(1)
        cell = doc.tables[0].rows[1].cells[0]
        assert cell.paragraphs[0].paragraph_format.space_before == Pt(2)

    def test_core_properties(self, sample_model):
        doc = _read(render_docx(sample_model).content)
        assert doc.core_properties.title == "Campylobacter-Enteritis (Campylobacter spp.)"

    def test_decision_tables_appendix(self, sample_model):
        doc = _read(render_docx(sample_model, include_decision_tables=True).content)
        assert len(doc.tables) == 1
        header = [c.text for c in doc.tables[0].rows[0].cells]
        assert header == ["Klinisches Bild", "i_labor", "Kategorie", "beschreibung"]
        assert len(doc.tables[0].rows) == 4

    def test_empty_model(self):
        texts = _texts(render_docx(NormalizedModel(metadata=Metadata())).content)
        assert texts == ["Gesetzliche Grundlage"]


# ── package_docx ─────────────────────────────────────────────────────

class TestPackageDocx:

    def test_all_block_types(self):
        blocks = (
            Heading("Title", 0),
            Heading("Section", 1),
            Paragraph(runs=(TextRun("bold ", bold=True), TextRun("plain"))),
            ListItem(runs=(TextRun("nested"),), level=2),
            CategoryItem(letter="A", description="Desc"),
            TableBlock(title="T", headers=("a", "b"), rows=(("1", "2"),)),
        )
        doc = _read(package_docx(blocks))
        texts = [p.text for p in doc.paragraphs if p.text]
        assert texts == ["Title", "Section", "bold plain", "nested", "A. Desc"]
        nested = next(p for p in doc.paragraphs if p.text == "nested")
        assert nested.style.name == "List Bullet 2"
        assert doc.tables[0].rows[1].cells[1].text == "2"

    def test_illegal_characters_removed(self):
        content = package_docx((Paragraph(runs=(TextRun("a\x01b"),)),))
        assert _texts(content) == ["ab"]

    def test_unsupported_block_raises_serialization_error(self):
        with pytest.raises(SerializationError) as exc:
            package_docx((object(),))
        assert exc.value.stage == "package"
        assert isinstance(exc.value.cause, TypeError)

    def test_packager_failure_is_fatal(self, monkeypatch, sample_model):
        def _broken():
            raise RuntimeError("disk full")

        monkeypatch.setattr("rendering.docx_renderer.Document", _broken)
        with pytest.raises(ConversionError, match="disk full"):
            render_docx(sample_model)
