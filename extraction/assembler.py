"""
Model Assembler - parsed decision document -> NormalizedModel.

Runs the Metadata and Structural Extractors once, resolves the section text
for every role, applies the two cross-field extractions (incubation period,
additional information) and returns one immutable model. Missing optional
content never raises; it is recorded as a Diagnostic and logged.
"""

from typing import Dict, List, Optional

from core.case_definition_config import CaseDefinitionConfig, get_case_definition_config
from core.logging_config import stage_logger

from .metadata_extractor import extract_metadata, missing_metadata_fields
from .narrative import (
    CRITERIA_ROLES,
    additional_information_section,
    find_legacy_input,
    find_role_decision,
    incubation_period_text,
    legacy_section,
    resolve_role_section,
)
from .schema import (
    DecisionRole,
    Diagnostic,
    DiagnosticKind,
    InputElement,
    NormalizedModel,
    Section,
)
from .structure_extractor import extract_structure

logger = stage_logger(__name__, "assemble")


def build_model(doc, locale: Optional[str] = None,
                config: CaseDefinitionConfig = None) -> NormalizedModel:
    """
    Assemble the NormalizedModel for a parsed, pre-validated decision document.

    Args:
        doc: Parsed element tree or root element (lxml or xml.etree)
        locale: Output locale code for synthesized text (default from config)
        config: Vocabulary config (defaults to the bundled one)

    Returns:
        NormalizedModel built fresh for this call

    Raises:
        ConfigurationError: unknown locale
    """
    config = config or get_case_definition_config()
    text = config.locale(locale)
    diagnostics: List[Diagnostic] = []

    metadata = extract_metadata(doc, config)
    for key in missing_metadata_fields(metadata):
        diagnostics.append(Diagnostic(
            kind=DiagnosticKind.MISSING_METADATA_FIELD,
            message=f"Metadata field '{key}' not present",
            subject_id=key,
        ))

    structure = extract_structure(doc, config)
    diagnostics.extend(structure.diagnostics)
    inputs = structure.input_elements
    decisions = structure.decisions

    inputs_by_id: Dict[str, InputElement] = {}
    for inp in inputs:
        if inp.id:
            inputs_by_id.setdefault(inp.id, inp)

    # --- Criteria sections ---
    role_sections: Dict[DecisionRole, Optional[Section]] = {}
    role_decisions = {}
    for role in CRITERIA_ROLES:
        decision = find_role_decision(decisions, role)
        role_decisions[role] = decision
        if decision is None:
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.NO_MATCHING_DECISION,
                message=f"No decision for role '{role.value}', using legacy section",
                subject_id=role.value,
            ))
        legacy = find_legacy_input(inputs, config.role_legacy_keys(role.value))
        role_sections[role] = resolve_role_section(role, decision, legacy, inputs_by_id, text)

    # --- Cross-field extractions ---
    incubation = incubation_period_text(role_decisions[DecisionRole.EPI_CONFIRMATION], config)
    if incubation:
        metadata = metadata.with_incubation_period(incubation)

    additional = additional_information_section(role_decisions[DecisionRole.LAB_EVIDENCE])
    if additional is None:
        additional = legacy_section(
            find_legacy_input(inputs, config.legacy_section_keys("additional_information"))
        )

    def _legacy(key: str) -> Optional[Section]:
        return legacy_section(find_legacy_input(inputs, config.legacy_section_keys(key)))

    model = NormalizedModel(
        metadata=metadata,
        clinical_picture=role_sections[DecisionRole.CLINICAL_PICTURE],
        lab_evidence=role_sections[DecisionRole.LAB_EVIDENCE],
        epi_confirmation=role_sections[DecisionRole.EPI_CONFIRMATION],
        additional_information=additional,
        reference_definition=_legacy("reference_definition"),
        reporting_obligation=_legacy("reporting_obligation"),
        transmission=_legacy("transmission"),
        classification=find_role_decision(decisions, DecisionRole.CLASSIFICATION),
        decisions=tuple(decisions),
        input_elements=tuple(inputs),
        locale=text.code,
        diagnostics=tuple(diagnostics),
    )

    for diag in diagnostics:
        logger.debug(f"{diag.kind.value}: {diag.message}")
    logger.info(
        f"Assembled model for '{metadata.disease or '?'}': "
        f"{len(decisions)} decisions, {len(diagnostics)} diagnostics"
    )
    return model
