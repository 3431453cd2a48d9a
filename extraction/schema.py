"""
Case-Definition Model Schema - types shared by extraction and rendering.

Every entity is a frozen dataclass built fresh per conversion call. The
NormalizedModel is the single format-independent structure both renderers
consume; nothing in it is mutated after assembly.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.constants import DEFAULT_LOCALE


class DecisionRole(Enum):
    """Semantic role of a decision, resolved once from its name."""
    CLINICAL_PICTURE = "clinical_picture"
    LAB_EVIDENCE = "lab_evidence"
    EPI_CONFIRMATION = "epi_confirmation"
    CLASSIFICATION = "classification"
    UNKNOWN = "unknown"


class SectionOrigin(Enum):
    """Where a section's text came from. Text is never mixed across origins."""
    SYNTHESIZED = "synthesized"      # templated prose built from resolved inputs
    GENERIC = "generic"              # role's fixed fallback sentence
    LEGACY = "legacy"                # verbatim documentation of a legacy input element
    DOCUMENTATION = "documentation"  # verbatim documentation of a decision


class DiagnosticKind(Enum):
    """Non-fatal conditions recorded during extraction and rendering."""
    MISSING_METADATA_FIELD = "missing_metadata_field"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    NO_MATCHING_DECISION = "no_matching_decision"
    MALFORMED_RULE_ROW = "malformed_rule_row"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    subject_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d = {"kind": self.kind.value, "message": self.message}
        if self.subject_id:
            d["subjectId"] = self.subject_id
        return d


@dataclass(frozen=True)
class Metadata:
    """Flat metadata fields. A field missing from the document is None."""
    disease: Optional[str] = None
    pathogen: Optional[str] = None
    reference_date: Optional[str] = None
    version: Optional[str] = None
    incubation_period: Optional[str] = None

    def with_incubation_period(self, text: str) -> "Metadata":
        return replace(self, incubation_period=text)

    @property
    def title(self) -> Optional[str]:
        """'disease (pathogen)' when both are present."""
        if self.disease and self.pathogen:
            return f"{self.disease} ({self.pathogen})"
        return None

    def to_dict(self) -> Dict[str, str]:
        result = {}
        for key, value in (
            ("disease", self.disease),
            ("pathogen", self.pathogen),
            ("referenceDate", self.reference_date),
            ("version", self.version),
            ("incubationPeriod", self.incubation_period),
        ):
            if value is not None:
                result[key] = value
        return result


@dataclass(frozen=True)
class InputElement:
    """A top-level input data element. Identity is its id."""
    id: str
    name: str
    label: str
    documentation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "documentation": self.documentation,
        }


@dataclass(frozen=True)
class InputSpec:
    """An input column of a decision table."""
    id: str
    label: str
    expression: str = ""


@dataclass(frozen=True)
class OutputSpec:
    """An output column of a decision table."""
    id: str
    label: str
    name: str


@dataclass(frozen=True)
class Rule:
    """One decision-table row. Entry counts are not enforced against the columns."""
    input_entries: Tuple[str, ...] = ()
    output_entries: Tuple[str, ...] = ()

    @property
    def cells(self) -> Tuple[str, ...]:
        return self.input_entries + self.output_entries


@dataclass(frozen=True)
class DecisionTable:
    inputs: Tuple[InputSpec, ...] = ()
    outputs: Tuple[OutputSpec, ...] = ()
    rules: Tuple[Rule, ...] = ()

    def headers(self) -> List[str]:
        """Column headers: input label or id, then output label, name or id."""
        return (
            [i.label or i.id for i in self.inputs]
            + [o.label or o.name or o.id for o in self.outputs]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": [
                {"id": i.id, "label": i.label, "expression": i.expression}
                for i in self.inputs
            ],
            "outputs": [
                {"id": o.id, "label": o.label, "name": o.name}
                for o in self.outputs
            ],
            "rules": [
                {"inputEntries": list(r.input_entries), "outputEntries": list(r.output_entries)}
                for r in self.rules
            ],
        }


@dataclass(frozen=True)
class Decision:
    """A decision element. Identity is its id."""
    id: str
    name: str
    label: str
    documentation: str = ""
    decision_table: Optional[DecisionTable] = None
    information_requirements: Tuple[str, ...] = ()
    role: DecisionRole = DecisionRole.UNKNOWN

    @property
    def display_name(self) -> str:
        return self.label or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "label": self.label,
            "documentation": self.documentation,
            "decisionTable": self.decision_table.to_dict() if self.decision_table else None,
            "informationRequirements": list(self.information_requirements),
            "role": self.role.value,
        }


@dataclass(frozen=True)
class Section:
    """Text for one document section and where it came from."""
    text: str
    origin: SectionOrigin

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "origin": self.origin.value}


@dataclass(frozen=True)
class NormalizedModel:
    """Format-independent case definition consumed by both renderers."""
    metadata: Metadata = field(default_factory=Metadata)
    clinical_picture: Optional[Section] = None
    lab_evidence: Optional[Section] = None
    epi_confirmation: Optional[Section] = None
    additional_information: Optional[Section] = None
    reference_definition: Optional[Section] = None
    reporting_obligation: Optional[Section] = None
    transmission: Optional[Section] = None
    classification: Optional[Decision] = None
    decisions: Tuple[Decision, ...] = ()
    input_elements: Tuple[InputElement, ...] = ()
    locale: str = DEFAULT_LOCALE
    diagnostics: Tuple[Diagnostic, ...] = ()

    def decisions_with_tables(self) -> List[Decision]:
        return [d for d in self.decisions if d.decision_table is not None]

    def to_dict(self) -> Dict[str, Any]:
        def _section(s: Optional[Section]) -> Optional[Dict[str, str]]:
            return s.to_dict() if s else None

        return {
            "metadata": self.metadata.to_dict(),
            "clinicalPicture": _section(self.clinical_picture),
            "labEvidence": _section(self.lab_evidence),
            "epiConfirmation": _section(self.epi_confirmation),
            "additionalInformation": _section(self.additional_information),
            "referenceDefinition": _section(self.reference_definition),
            "legalBasis": {
                "reportingObligation": _section(self.reporting_obligation),
                "transmission": _section(self.transmission),
            },
            "classification": self.classification.to_dict() if self.classification else None,
            "decisions": [d.to_dict() for d in self.decisions],
            "inputElements": [i.to_dict() for i in self.input_elements],
            "locale": self.locale,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
