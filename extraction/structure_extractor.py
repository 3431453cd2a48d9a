"""
Structural Extractor - input elements, decisions, decision tables and
information requirements, in document order.

Each decision's role is resolved here, once, from its name via the
case-definition vocabulary; downstream code dispatches on Decision.role only.

Information requirements pointing at ids that exist nowhere in the document
are dropped and recorded as UNRESOLVED_REFERENCE diagnostics.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Set

from core.case_definition_config import CaseDefinitionConfig, get_case_definition_config

from .schema import (
    Decision,
    DecisionRole,
    DecisionTable,
    Diagnostic,
    DiagnosticKind,
    InputElement,
    InputSpec,
    OutputSpec,
    Rule,
)
from .xml_utils import (
    child_text,
    children_named,
    first_child,
    first_descendant,
    get_root,
    iter_named,
    local_name,
    text_content,
)

logger = logging.getLogger(__name__)

_REQUIREMENT_LINKS = ("requiredInput", "requiredDecision")


@dataclass
class StructureExtractionResult:
    """Input elements, decisions and non-fatal diagnostics from one document."""
    input_elements: List[InputElement] = field(default_factory=list)
    decisions: List[Decision] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def _documentation(el) -> str:
    """Prose documentation, else description, else ''."""
    doc = first_child(el, "documentation")
    if doc is not None:
        return text_content(doc)
    return child_text(el, "description")


def _href_id(href: Optional[str]) -> str:
    """'#id' or 'model.dmn#id' -> 'id'."""
    if not href:
        return ""
    return href.rsplit("#", 1)[-1].strip()


# ---------------------------------------------------------------------------
# Input elements
# ---------------------------------------------------------------------------

def extract_input_elements(doc) -> List[InputElement]:
    """All inputData elements in document order. Label defaults to name."""
    root = get_root(doc)
    inputs = []
    for el in iter_named(root, "inputData"):
        name = el.get("name") or ""
        inputs.append(InputElement(
            id=el.get("id") or "",
            name=name,
            label=el.get("label") or name,
            documentation=_documentation(el),
        ))
    return inputs


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

def _entry_texts(rule_el, entry_name: str) -> tuple:
    return tuple(
        child_text(entry, "text")
        for entry in children_named(rule_el, entry_name)
    )


def extract_decision_table(decision_el) -> Optional[DecisionTable]:
    """Parse the decision table nested in a decision element, if any."""
    table = first_descendant(decision_el, "decisionTable")
    if table is None:
        return None

    inputs = tuple(
        InputSpec(
            id=inp.get("id") or "",
            label=inp.get("label") or "",
            expression=text_content(first_child(inp, "inputExpression")),
        )
        for inp in children_named(table, "input")
    )
    outputs = tuple(
        OutputSpec(
            id=out.get("id") or "",
            label=out.get("label") or "",
            name=out.get("name") or "",
        )
        for out in children_named(table, "output")
    )
    rules = tuple(
        Rule(
            input_entries=_entry_texts(rule, "inputEntry"),
            output_entries=_entry_texts(rule, "outputEntry"),
        )
        for rule in children_named(table, "rule")
    )
    return DecisionTable(inputs=inputs, outputs=outputs, rules=rules)


def extract_requirement_ids(decision_el) -> List[str]:
    """Referenced ids from the decision's information requirements, in order.

    Links without a usable href are skipped.
    """
    ids = []
    for req in children_named(decision_el, "informationRequirement"):
        for link in req:
            if local_name(link) not in _REQUIREMENT_LINKS:
                continue
            ref = _href_id(link.get("href"))
            if ref:
                ids.append(ref)
            else:
                logger.debug(f"Skipping {local_name(link)} without href in {decision_el.get('id')}")
    return ids


def extract_decisions(doc, config: CaseDefinitionConfig = None) -> List[Decision]:
    """All decision elements in document order, roles resolved, references unfiltered."""
    config = config or get_case_definition_config()
    root = get_root(doc)
    decisions = []
    for el in iter_named(root, "decision"):
        name = el.get("name") or ""
        decisions.append(Decision(
            id=el.get("id") or "",
            name=name,
            label=el.get("label") or name,
            documentation=_documentation(el),
            decision_table=extract_decision_table(el),
            information_requirements=tuple(extract_requirement_ids(el)),
            role=DecisionRole(config.match_role(name)),
        ))
    return decisions


def _drop_unresolved(decisions: List[Decision], known_ids: Set[str],
                     diagnostics: List[Diagnostic]) -> List[Decision]:
    resolved = []
    for decision in decisions:
        kept = tuple(r for r in decision.information_requirements if r in known_ids)
        for ref in decision.information_requirements:
            if ref not in known_ids:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.UNRESOLVED_REFERENCE,
                    message=f"Decision '{decision.id}' requires unknown id '{ref}'",
                    subject_id=decision.id,
                ))
        if len(kept) != len(decision.information_requirements):
            decision = replace(decision, information_requirements=kept)
        resolved.append(decision)
    return resolved


def extract_structure(doc, config: CaseDefinitionConfig = None) -> StructureExtractionResult:
    """Extract input elements and decisions, dropping unresolvable references."""
    config = config or get_case_definition_config()
    result = StructureExtractionResult()

    result.input_elements = extract_input_elements(doc)
    decisions = extract_decisions(doc, config)

    known_ids = {i.id for i in result.input_elements if i.id}
    known_ids.update(d.id for d in decisions if d.id)
    result.decisions = _drop_unresolved(decisions, known_ids, result.diagnostics)

    for diag in result.diagnostics:
        logger.debug(diag.message)

    tables = sum(1 for d in result.decisions if d.decision_table is not None)
    logger.info(
        f"Extracted {len(result.input_elements)} input elements, "
        f"{len(result.decisions)} decisions ({tables} with tables)"
    )
    return result
