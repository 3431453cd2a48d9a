"""
Tests for main.py - file conversion and the command-line entry point.
"""

import logging

import pytest

from core.errors import ConfigurationError, InputError
from main import convert_file, main, parse_document


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """main() reconfigures the root logger; restore it afterwards."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.level = original_level


@pytest.fixture
def dmn_file(tmp_path, sample_dmn_text):
    path = tmp_path / "campylobacter.dmn"
    path.write_text(sample_dmn_text, encoding="utf-8")
    return path


# ── parse_document ───────────────────────────────────────────────────

class TestParseDocument:

    def test_parses_file(self, dmn_file):
        assert parse_document(str(dmn_file)).getroot() is not None

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError) as exc:
            parse_document(str(tmp_path / "missing.dmn"))
        assert exc.value.stage == "parse"

    def test_malformed_xml(self, tmp_path):
        path = tmp_path / "broken.dmn"
        path.write_text("<definitions><decision></definitions>", encoding="utf-8")
        with pytest.raises(InputError, match="Invalid XML"):
            parse_document(str(path))


# ── convert_file ─────────────────────────────────────────────────────

class TestConvertFile:

    def test_both_outputs(self, dmn_file, tmp_path):
        out = tmp_path / "out"
        written = convert_file(str(dmn_file), str(out))
        assert written == [str(out / "campylobacter.docx"), str(out / "campylobacter_tables.md")]
        assert (out / "campylobacter.docx").read_bytes()[:2] == b"PK"
        tables = (out / "campylobacter_tables.md").read_text(encoding="utf-8")
        assert tables.startswith("# Campylobacter-Enteritis (Campylobacter spp.)")

    @pytest.mark.parametrize("fmt,suffix", [("docx", ".docx"), ("md", "_tables.md")])
    def test_single_format(self, dmn_file, tmp_path, fmt, suffix):
        written = convert_file(str(dmn_file), str(tmp_path / "out"), formats=fmt)
        assert len(written) == 1
        assert written[0].endswith(suffix)

    def test_unknown_locale_writes_nothing(self, dmn_file, tmp_path):
        out = tmp_path / "out"
        with pytest.raises(ConfigurationError):
            convert_file(str(dmn_file), str(out), locale="fr")
        assert not out.exists() or not any(out.iterdir())


# ── main ─────────────────────────────────────────────────────────────

class TestMain:

    def test_success(self, dmn_file, tmp_path):
        out = tmp_path / "out"
        assert main([str(dmn_file), "-o", str(out), "--include-tables"]) == 0
        assert (out / "campylobacter.docx").exists()

    def test_bad_xml_returns_1(self, tmp_path):
        path = tmp_path / "broken.dmn"
        path.write_text("not xml", encoding="utf-8")
        assert main([str(path), "-o", str(tmp_path)]) == 1

    def test_bad_style_returns_1(self, dmn_file, tmp_path):
        style = tmp_path / "style.yaml"
        style.write_text("headingColor: blue\n", encoding="utf-8")
        assert main([str(dmn_file), "-o", str(tmp_path), "--style", str(style)]) == 1

    def test_locale_from_environment(self, dmn_file, tmp_path, monkeypatch):
        monkeypatch.setenv("DMN_LOCALE", "en")
        out = tmp_path / "out"
        assert main([str(dmn_file), "-o", str(out), "-f", "md"]) == 0
        assert "**Reference date:**" in (out / "campylobacter_tables.md").read_text(encoding="utf-8")

    def test_json_log_file(self, dmn_file, tmp_path):
        log = tmp_path / "logs" / "run.jsonl"
        assert main([str(dmn_file), "-o", str(tmp_path), "--log-file", str(log)]) == 0
        for h in logging.getLogger().handlers:
            h.flush()
        assert '"level": "INFO"' in log.read_text(encoding="utf-8")
        for h in logging.getLogger().handlers[:]:
            if isinstance(h, logging.FileHandler):
                h.close()
