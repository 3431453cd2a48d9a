"""
Case-definition vocabulary loader.

Single source of truth for the names the converter recognizes (metadata
fields, role decisions, legacy sections) and the localized text it emits
(headings, narrative templates, emphasis keywords, category descriptions).
Extraction and both renderers read from the YAML config via this module
instead of hardcoding their own lists.

Usage:
    from core.case_definition_config import get_case_definition_config

    config = get_case_definition_config()
    role = config.match_role("Klinisches Bild")      # -> "clinical_picture"
    text = config.locale("de").narrative("lab_evidence").intro
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

import yaml

from core.constants import DEFAULT_LOCALE
from core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "case_definition.yaml")

ROLE_KEYS = ("clinical_picture", "lab_evidence", "epi_confirmation")
CLASSIFICATION = "classification"
UNKNOWN = "unknown"
METADATA_KEYS = ("disease", "pathogen", "reference_date", "version", "incubation_period")
LEGACY_SECTION_KEYS = (
    "additional_information",
    "reference_definition",
    "reporting_obligation",
    "transmission",
)
HEADING_KEYS = ROLE_KEYS + LEGACY_SECTION_KEYS + (
    "classification", "legal_basis", "decision_tables",
)
LABEL_KEYS = ("incubation_period", "reference_date", "version", "decision")
CATEGORY_LETTERS = ("A", "B", "C", "D", "E")


def normalize_name(name: str) -> str:
    """Case-fold a name and treat spaces and hyphens as underscores."""
    return "_".join(name.strip().casefold().replace("-", " ").split())


# ---------------------------------------------------------------------------
# Data classes - typed views over the YAML config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoleVocabulary:
    """Recognized decision names and legacy input keys for one role."""
    role: str
    decision_names: Tuple[str, ...]
    legacy_keys: Tuple[str, ...]


@dataclass(frozen=True)
class NarrativeTemplate:
    """Localized prose pieces for one synthesized section."""
    intro: str
    fallback: str
    closing: str = ""


@dataclass(frozen=True)
class LocaleText:
    """All output text for one locale."""
    code: str
    headings: Dict[str, str]
    narratives: Dict[str, NarrativeTemplate]
    keywords: Tuple[str, ...]
    categories: Dict[str, str]
    labels: Dict[str, str]

    def heading(self, key: str) -> str:
        return self.headings[key]

    def narrative(self, role: str) -> NarrativeTemplate:
        return self.narratives[role]

    def label(self, key: str) -> str:
        return self.labels[key]

    def category_description(self, letter: str) -> Optional[str]:
        """Canned description for a recognized category letter, else None."""
        return self.categories.get(letter)


@dataclass
class CaseDefinitionConfig:
    """
    Parsed case-definition vocabulary.

    Consumed by:
      - extraction.metadata_extractor   (metadata field aliases)
      - extraction.structure_extractor  (role and classification names)
      - extraction.narrative            (legacy keys, templates, incubation terms)
      - rendering.*                     (headings, keywords, categories, labels)
    """
    schema_version: str
    default_locale: str
    metadata_container: str
    _metadata_fields: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    _roles: Dict[str, RoleVocabulary] = field(default_factory=dict)
    _classification_names: Tuple[str, ...] = ()
    _classification_substrings: Tuple[str, ...] = ()
    _legacy_sections: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    _incubation_terms: Tuple[str, ...] = ()
    _locales: Dict[str, LocaleText] = field(default_factory=dict)

    # --- Metadata ---

    def metadata_aliases(self) -> Dict[str, Tuple[str, ...]]:
        """Metadata key -> recognized element local names."""
        return dict(self._metadata_fields)

    # --- Role dispatch ---

    def match_role(self, name: str) -> str:
        """Resolve a decision name to a role key, 'classification' or 'unknown'."""
        if not name:
            return UNKNOWN
        norm = normalize_name(name)
        for role in ROLE_KEYS:
            if norm in self._roles[role].decision_names:
                return role
        if norm in self._classification_names:
            return CLASSIFICATION
        if any(sub in norm for sub in self._classification_substrings):
            return CLASSIFICATION
        return UNKNOWN

    def role_legacy_keys(self, role: str) -> Tuple[str, ...]:
        return self._roles[role].legacy_keys

    def legacy_section_keys(self, section: str) -> Tuple[str, ...]:
        return self._legacy_sections[section]

    def has_incubation_term(self, text: str) -> bool:
        folded = text.casefold()
        return any(term in folded for term in self._incubation_terms)

    # --- Locales ---

    def locales(self) -> List[str]:
        return list(self._locales)

    def locale(self, code: Optional[str] = None) -> LocaleText:
        """Localized text for a locale code (default locale when None)."""
        code = code or self.default_locale
        try:
            return self._locales[code]
        except KeyError:
            raise ConfigurationError(
                f"Unknown locale '{code}' (available: {', '.join(self._locales)})",
                stage="config",
            ) from None


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _names(values: List[str]) -> Tuple[str, ...]:
    return tuple(normalize_name(str(v)) for v in values)


def _parse_config(raw: Dict[str, Any]) -> CaseDefinitionConfig:
    """Parse raw YAML dict into typed CaseDefinitionConfig."""

    roles = {
        role: RoleVocabulary(
            role=role,
            decision_names=_names(data.get("decision_names", [])),
            legacy_keys=_names(data.get("legacy_keys", [])),
        )
        for role, data in raw["roles"].items()
    }

    locales: Dict[str, LocaleText] = {}
    for code, loc in raw["locales"].items():
        narratives = {
            role: NarrativeTemplate(
                intro=tpl["intro"],
                fallback=tpl["fallback"],
                closing=tpl.get("closing", ""),
            )
            for role, tpl in loc["narrative"].items()
        }
        locales[code] = LocaleText(
            code=code,
            headings=dict(loc["headings"]),
            narratives=narratives,
            keywords=tuple(loc.get("keywords", [])),
            categories={str(k): v for k, v in loc.get("categories", {}).items()},
            labels=dict(loc["labels"]),
        )

    classification = raw.get("classification", {})

    return CaseDefinitionConfig(
        schema_version=str(raw.get("schema_version", "1.0")),
        default_locale=raw.get("default_locale", DEFAULT_LOCALE),
        metadata_container=raw.get("metadata_container", "metadata"),
        _metadata_fields={
            key: tuple(str(v) for v in values)
            for key, values in raw["metadata_fields"].items()
        },
        _roles=roles,
        _classification_names=_names(classification.get("decision_names", [])),
        _classification_substrings=_names(classification.get("substrings", [])),
        _legacy_sections={
            key: _names(values) for key, values in raw["legacy_sections"].items()
        },
        _incubation_terms=tuple(t.casefold() for t in raw.get("incubation_terms", [])),
        _locales=locales,
    )


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class CaseDefinitionConfigError(Exception):
    """Raised when the case-definition YAML fails structural validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(
            f"Case-definition config has {len(errors)} validation error(s):\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _check_name_list(value: Any, prefix: str, errors: List[str]) -> None:
    if not isinstance(value, list) or not value:
        errors.append(f"{prefix}: must be a non-empty list")


def validate_case_definition_config(raw: Dict[str, Any]) -> List[str]:
    """Validate raw YAML dict against structural rules.

    Returns a list of error strings (empty = valid).
    """
    errors: List[str] = []

    if not isinstance(raw, dict):
        return ["config root must be a mapping"]

    for key in ("schema_version", "metadata_fields", "roles",
                "legacy_sections", "locales"):
        if key not in raw:
            errors.append(f"Missing top-level key: '{key}'")

    fields_ = raw.get("metadata_fields")
    if isinstance(fields_, dict):
        for key in METADATA_KEYS:
            if key not in fields_:
                errors.append(f"metadata_fields: missing '{key}'")
            else:
                _check_name_list(fields_[key], f"metadata_fields.{key}", errors)
    elif fields_ is not None:
        errors.append("'metadata_fields' must be a mapping")

    roles = raw.get("roles")
    if isinstance(roles, dict):
        for role in ROLE_KEYS:
            data = roles.get(role)
            if not isinstance(data, dict):
                errors.append(f"roles.{role}: must be a mapping")
                continue
            _check_name_list(data.get("decision_names"), f"roles.{role}.decision_names", errors)
            _check_name_list(data.get("legacy_keys"), f"roles.{role}.legacy_keys", errors)
    elif roles is not None:
        errors.append("'roles' must be a mapping")

    legacy = raw.get("legacy_sections")
    if isinstance(legacy, dict):
        for key in LEGACY_SECTION_KEYS:
            _check_name_list(legacy.get(key), f"legacy_sections.{key}", errors)
    elif legacy is not None:
        errors.append("'legacy_sections' must be a mapping")

    locales = raw.get("locales")
    if not isinstance(locales, dict):
        if locales is not None:
            errors.append("'locales' must be a mapping")
        return errors

    default_locale = raw.get("default_locale", DEFAULT_LOCALE)
    if default_locale not in locales:
        errors.append(f"default_locale '{default_locale}' not defined in locales")

    for code, loc in locales.items():
        prefix = f"locales.{code}"
        if not isinstance(loc, dict):
            errors.append(f"{prefix}: must be a mapping")
            continue
        headings = loc.get("headings", {})
        for key in HEADING_KEYS:
            if key not in headings:
                errors.append(f"{prefix}.headings: missing '{key}'")
        narrative = loc.get("narrative", {})
        for role in ROLE_KEYS:
            tpl = narrative.get(role)
            if not isinstance(tpl, dict):
                errors.append(f"{prefix}.narrative.{role}: must be a mapping")
                continue
            for req in ("intro", "fallback"):
                if not tpl.get(req):
                    errors.append(f"{prefix}.narrative.{role}: missing '{req}'")
        labels = loc.get("labels", {})
        for key in LABEL_KEYS:
            if key not in labels:
                errors.append(f"{prefix}.labels: missing '{key}'")
        keywords = loc.get("keywords", [])
        if not isinstance(keywords, list):
            errors.append(f"{prefix}.keywords: must be a list")
        categories = loc.get("categories", {})
        for letter in CATEGORY_LETTERS:
            if letter not in categories:
                errors.append(f"{prefix}.categories: missing '{letter}'")

    return errors


def load_case_definition_config(path: str = _CONFIG_PATH) -> CaseDefinitionConfig:
    """Load, validate, and parse the case-definition vocabulary from YAML.

    Raises CaseDefinitionConfigError if the YAML is structurally invalid.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    errors = validate_case_definition_config(raw)
    if errors:
        raise CaseDefinitionConfigError(errors)

    config = _parse_config(raw)
    logger.debug(
        f"Loaded case-definition config: {len(config.locales())} locales, "
        f"default '{config.default_locale}'"
    )
    return config


@lru_cache(maxsize=1)
def get_case_definition_config() -> CaseDefinitionConfig:
    """Get the cached case-definition config (singleton, read-only)."""
    return load_case_definition_config()
