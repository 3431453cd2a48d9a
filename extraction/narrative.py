"""
Narrative Synthesizer - section prose for the three criteria roles.

For clinical picture, lab evidence and epidemiological confirmation the text
is synthesized from the inputs a role decision requires:

    <intro sentence>
    - <input name>
    - <input name> (<input documentation>)
    <closing disjunct>            (clinical picture only)

A role decision with no resolvable inputs yields the role's generic fallback
sentence. Without a role decision, the documentation of the legacy input
element for that role is used verbatim. Keyword emphasis is applied later,
at render time.

Every function here is pure: same inputs, same Section.
"""

import logging
from typing import Dict, Iterable, List, Optional

from core.case_definition_config import (
    CaseDefinitionConfig,
    LocaleText,
    get_case_definition_config,
    normalize_name,
)

from .schema import Decision, DecisionRole, InputElement, Section, SectionOrigin

logger = logging.getLogger(__name__)

CRITERIA_ROLES = (
    DecisionRole.CLINICAL_PICTURE,
    DecisionRole.LAB_EVIDENCE,
    DecisionRole.EPI_CONFIRMATION,
)


def find_role_decision(decisions: Iterable[Decision], role: DecisionRole) -> Optional[Decision]:
    """First decision (document order) carrying the given role."""
    for decision in decisions:
        if decision.role is role:
            return decision
    return None


def find_legacy_input(inputs: Iterable[InputElement], keys: Iterable[str]) -> Optional[InputElement]:
    """First input element whose normalized name is one of the legacy keys."""
    wanted = set(keys)
    for inp in inputs:
        if inp.name and normalize_name(inp.name) in wanted:
            return inp
    return None


def resolve_inputs(decision: Decision, inputs_by_id: Dict[str, InputElement]) -> List[InputElement]:
    """Required inputs of a decision, in requirement order.

    Ids that resolve to another decision, or to nothing, are dropped.
    """
    return [inputs_by_id[ref] for ref in decision.information_requirements if ref in inputs_by_id]


def _criterion_line(inp: InputElement) -> str:
    name = inp.name or inp.label
    if inp.documentation:
        return f"- {name} ({inp.documentation})"
    return f"- {name}"


def synthesize_role_text(role: DecisionRole, decision: Decision,
                         inputs_by_id: Dict[str, InputElement],
                         text: LocaleText) -> Section:
    """Templated paragraph for a role decision, or its generic fallback sentence."""
    template = text.narrative(role.value)
    resolved = resolve_inputs(decision, inputs_by_id)
    if not resolved:
        logger.debug(f"No resolvable inputs for {role.value} decision '{decision.id}'")
        return Section(text=template.fallback, origin=SectionOrigin.GENERIC)

    lines = [template.intro]
    lines.extend(_criterion_line(inp) for inp in resolved)
    if role is DecisionRole.CLINICAL_PICTURE and template.closing:
        lines.append(template.closing)
    return Section(text="\n".join(lines), origin=SectionOrigin.SYNTHESIZED)


def legacy_section(legacy: Optional[InputElement]) -> Optional[Section]:
    """Verbatim documentation of a legacy input element (None when absent or empty)."""
    if legacy is None or not legacy.documentation:
        return None
    return Section(text=legacy.documentation, origin=SectionOrigin.LEGACY)


def resolve_role_section(role: DecisionRole, decision: Optional[Decision],
                         legacy: Optional[InputElement],
                         inputs_by_id: Dict[str, InputElement],
                         text: LocaleText) -> Optional[Section]:
    """Section text for a criteria role: synthesized when a decision exists, else legacy."""
    if decision is not None:
        return synthesize_role_text(role, decision, inputs_by_id, text)
    return legacy_section(legacy)


# ---------------------------------------------------------------------------
# Cross-field extractions
# ---------------------------------------------------------------------------

def incubation_period_text(epi_decision: Optional[Decision],
                           config: CaseDefinitionConfig = None) -> Optional[str]:
    """The epi decision's whole documentation when it mentions the incubation period."""
    config = config or get_case_definition_config()
    if epi_decision is None or not epi_decision.documentation:
        return None
    if config.has_incubation_term(epi_decision.documentation):
        return epi_decision.documentation
    return None


def additional_information_section(lab_decision: Optional[Decision]) -> Optional[Section]:
    """The lab decision's documentation, verbatim, when non-empty."""
    if lab_decision is None or not lab_decision.documentation:
        return None
    return Section(text=lab_decision.documentation, origin=SectionOrigin.DOCUMENTATION)
