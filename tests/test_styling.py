"""
Tests for core.styling - StylingConfig overrides and file loading.
"""

import json

import pytest

from core.errors import ConfigurationError
from core.styling import StylingConfig, load_styling


class TestDefaults:

    def test_default_values(self):
        s = StylingConfig()
        assert s.heading_color == "0070C0"
        assert s.table_header_fill == "D3D3D3"
        assert s.body_font == "Calibri"
        assert s.heading_size(0) == 16.0

    def test_heading_size_falls_back_to_deepest_level(self):
        assert StylingConfig().heading_size(3) == 12.0

    def test_round_trip_keys(self):
        assert set(StylingConfig().to_dict()) == {
            "headingColor", "bodyFont", "bodySize", "headingSizes",
            "spacingBefore", "spacingAfter", "tableHeaderFill",
            "pageWidth", "pageHeight", "marginTop", "marginBottom", "marginLeft", "marginRight",
            "headingSpacingBefore", "listSpacingBefore", "listSpacingAfter", "tableCellSpacing",
        }

    def test_layout_defaults(self):
        s = StylingConfig()
        assert (s.page_width, s.page_height) == (21.0, 29.7)
        assert (s.margin_top, s.margin_bottom, s.margin_left, s.margin_right) == (2.5, 2.0, 2.5, 2.5)
        assert (s.heading_spacing_before, s.list_spacing_before, s.list_spacing_after) == (12.0, 0.0, 3.0)
        assert s.table_cell_spacing == 0.0


class TestFromDict:

    def test_camel_case_and_hash_prefix(self):
        s = StylingConfig.from_dict({"headingColor": "#c00000", "bodySize": "10"})
        assert s.heading_color == "C00000"
        assert s.body_size == 10.0

    def test_layout_keys(self):
        s = StylingConfig.from_dict({"marginTop": "1.8", "page_height": 27.94, "tableCellSpacing": 1})
        assert s.margin_top == 1.8
        assert s.page_height == 27.94
        assert s.table_cell_spacing == 1.0

    def test_snake_case_accepted(self):
        assert StylingConfig.from_dict({"body_font": "Arial"}).body_font == "Arial"

    def test_heading_sizes_merged_over_defaults(self):
        s = StylingConfig.from_dict({"headingSizes": {"1": 18}})
        assert s.heading_sizes == {0: 16.0, 1: 18.0, 2: 12.0}

    def test_empty_gives_defaults(self):
        assert StylingConfig.from_dict({}) == StylingConfig()

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="fontColour"):
            StylingConfig.from_dict({"fontColour": "000000"})

    @pytest.mark.parametrize("bad", ["blue", "12345", "GGGGGG", ""])
    def test_invalid_colour(self, bad):
        with pytest.raises(ConfigurationError):
            StylingConfig.from_dict({"tableHeaderFill": bad})

    def test_invalid_size(self):
        with pytest.raises(ConfigurationError):
            StylingConfig.from_dict({"bodySize": "large"})

    def test_invalid_margin(self):
        with pytest.raises(ConfigurationError):
            StylingConfig.from_dict({"marginLeft": [2]})


class TestLoadStyling:

    def test_yaml(self, tmp_path):
        path = tmp_path / "style.yaml"
        path.write_text("headingColor: '1F4E79'\nspacingAfter: 4\n", encoding="utf-8")
        s = load_styling(str(path))
        assert s.heading_color == "1F4E79"
        assert s.spacing_after == 4.0

    def test_json(self, tmp_path):
        path = tmp_path / "style.json"
        path.write_text(json.dumps({"bodyFont": "Arial"}), encoding="utf-8")
        assert load_styling(str(path)).body_font == "Arial"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc:
            load_styling(str(tmp_path / "missing.yaml"))
        assert exc.value.stage == "config"

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "style.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_styling(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "style.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_styling(str(path))
