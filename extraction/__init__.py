"""
Case-definition extraction.

Parsed decision document -> NormalizedModel:
- Metadata Extractor (flat metadata fields)
- Structural Extractor (input elements, decisions, tables, requirements)
- Narrative Synthesizer (criteria section prose)
- Model Assembler (orchestration, cross-field extractions)
"""

from .assembler import build_model
from .metadata_extractor import extract_metadata
from .narrative import resolve_role_section, synthesize_role_text
from .schema import (
    Decision,
    DecisionRole,
    DecisionTable,
    Diagnostic,
    DiagnosticKind,
    InputElement,
    InputSpec,
    Metadata,
    NormalizedModel,
    OutputSpec,
    Rule,
    Section,
    SectionOrigin,
)
from .structure_extractor import extract_structure, StructureExtractionResult

__all__ = [
    "build_model",
    "extract_metadata",
    "extract_structure",
    "StructureExtractionResult",
    "resolve_role_section",
    "synthesize_role_text",
    "Decision",
    "DecisionRole",
    "DecisionTable",
    "Diagnostic",
    "DiagnosticKind",
    "InputElement",
    "InputSpec",
    "Metadata",
    "NormalizedModel",
    "OutputSpec",
    "Rule",
    "Section",
    "SectionOrigin",
]
