"""
Styling configuration for the DOCX renderer.

Every visual constant the renderer uses lives here so callers can override
it. Recognized keys (camelCase as in the host configuration, snake_case also
accepted):

    headingColor      hex RGB, default 0070C0
    bodyFont          default Calibri
    bodySize          pt, default 11
    headingSizes      level -> pt (0 = title), default {0: 16, 1: 14, 2: 12}
    spacingBefore     pt, default 6
    spacingAfter      pt, default 6
    tableHeaderFill   hex RGB, default D3D3D3
    pageWidth         cm, default 21.0 (A4)
    pageHeight        cm, default 29.7 (A4)
    marginTop         cm, default 2.5
    marginBottom      cm, default 2.0
    marginLeft        cm, default 2.5
    marginRight       cm, default 2.5
    headingSpacingBefore  pt, default 12
    listSpacingBefore     pt, default 0
    listSpacingAfter      pt, default 3
    tableCellSpacing      pt before and after each table cell paragraph, default 0

Usage:
    from core.styling import StylingConfig, load_styling

    styling = StylingConfig.from_dict({"headingColor": "C00000"})
    styling = load_styling("style.yaml")
"""

import json
import logging
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict

import yaml

from core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9A-Fa-f]{6}$")

_KEY_ALIASES = {
    "headingColor": "heading_color",
    "bodyFont": "body_font",
    "bodySize": "body_size",
    "headingSizes": "heading_sizes",
    "spacingBefore": "spacing_before",
    "spacingAfter": "spacing_after",
    "tableHeaderFill": "table_header_fill",
    "pageWidth": "page_width",
    "pageHeight": "page_height",
    "marginTop": "margin_top",
    "marginBottom": "margin_bottom",
    "marginLeft": "margin_left",
    "marginRight": "margin_right",
    "headingSpacingBefore": "heading_spacing_before",
    "listSpacingBefore": "list_spacing_before",
    "listSpacingAfter": "list_spacing_after",
    "tableCellSpacing": "table_cell_spacing",
}

_NUMERIC_KEYS = (
    "body_size", "spacing_before", "spacing_after",
    "page_width", "page_height",
    "margin_top", "margin_bottom", "margin_left", "margin_right",
    "heading_spacing_before", "list_spacing_before", "list_spacing_after",
    "table_cell_spacing",
)


def _default_heading_sizes() -> Dict[int, float]:
    return {0: 16.0, 1: 14.0, 2: 12.0}


@dataclass(frozen=True)
class StylingConfig:
    """Visual constants for the DOCX renderer."""
    heading_color: str = "0070C0"
    body_font: str = "Calibri"
    body_size: float = 11.0
    heading_sizes: Dict[int, float] = field(default_factory=_default_heading_sizes)
    spacing_before: float = 6.0
    spacing_after: float = 6.0
    table_header_fill: str = "D3D3D3"
    page_width: float = 21.0
    page_height: float = 29.7
    margin_top: float = 2.5
    margin_bottom: float = 2.0
    margin_left: float = 2.5
    margin_right: float = 2.5
    heading_spacing_before: float = 12.0
    list_spacing_before: float = 0.0
    list_spacing_after: float = 3.0
    table_cell_spacing: float = 0.0

    def heading_size(self, level: int) -> float:
        """Size for a heading level, falling back to the deepest configured level."""
        if level in self.heading_sizes:
            return self.heading_sizes[level]
        deeper = [lvl for lvl in self.heading_sizes if lvl <= level]
        if deeper:
            return self.heading_sizes[max(deeper)]
        return self.body_size

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StylingConfig":
        """Build a config from a mapping, overriding only the keys given.

        Raises ConfigurationError for unknown keys or invalid values.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        overrides: Dict[str, Any] = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown styling option '{key}'", stage="config")
            overrides[name] = value

        for color_key in ("heading_color", "table_header_fill"):
            if color_key in overrides:
                color = str(overrides[color_key]).lstrip("#")
                if not _HEX_RE.match(color):
                    raise ConfigurationError(
                        f"Invalid hex colour for {color_key}: '{overrides[color_key]}'",
                        stage="config",
                    )
                overrides[color_key] = color.upper()

        try:
            for size_key in _NUMERIC_KEYS:
                if size_key in overrides:
                    overrides[size_key] = float(overrides[size_key])
            if "heading_sizes" in overrides:
                sizes = dict(_default_heading_sizes())
                sizes.update({int(k): float(v) for k, v in overrides["heading_sizes"].items()})
                overrides["heading_sizes"] = sizes
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid styling value: {e}", stage="config", cause=e)

        return replace(cls(), **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headingColor": self.heading_color,
            "bodyFont": self.body_font,
            "bodySize": self.body_size,
            "headingSizes": dict(self.heading_sizes),
            "spacingBefore": self.spacing_before,
            "spacingAfter": self.spacing_after,
            "tableHeaderFill": self.table_header_fill,
            "pageWidth": self.page_width,
            "pageHeight": self.page_height,
            "marginTop": self.margin_top,
            "marginBottom": self.margin_bottom,
            "marginLeft": self.margin_left,
            "marginRight": self.margin_right,
            "headingSpacingBefore": self.heading_spacing_before,
            "listSpacingBefore": self.list_spacing_before,
            "listSpacingAfter": self.list_spacing_after,
            "tableCellSpacing": self.table_cell_spacing,
        }


def load_styling(path: str) -> StylingConfig:
    """Load a styling config from a YAML or JSON file."""
    file_path = Path(path)
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read styling config {file_path}", stage="config", source=str(file_path), cause=e,
        )

    try:
        if file_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        else:
            data = json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot parse styling config {file_path}", stage="config", source=str(file_path), cause=e,
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Styling config {file_path} must be a mapping", stage="config", source=str(file_path),
        )

    styling = StylingConfig.from_dict(data)
    logger.info(f"Loaded styling config from {file_path}")
    return styling
