"""
Document block builder - NormalizedModel -> ordered block sequence.

Fixed section order:
  title "disease (pathogen)"            (only when both are present)
  clinical picture
  laboratory evidence
  additional information
  epidemiological confirmation          (+ incubation-period line)
  case categories A, B, C, ...          (classification decision)
  reference definition
  legal basis                           (always) + reporting obligation, transmission
  decision tables appendix              (optional)

Pure: builds new blocks on every call and never touches the model.
"""

import logging
from typing import List, Optional, Tuple

from core.case_definition_config import LocaleText, get_case_definition_config
from extraction.schema import Decision, NormalizedModel, Section

from .blocks import Block, CategoryItem, Heading, Paragraph, TableBlock, TextRun
from .text_formatting import parse_section_text

logger = logging.getLogger(__name__)


def sequential_letter(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA', ..."""
    letters = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def _section_blocks(heading: str, section: Optional[Section], text: LocaleText,
                    level: int = 1) -> List[Block]:
    if section is None:
        return []
    return [Heading(heading, level)] + parse_section_text(section.text, text.keywords)


def category_blocks(decision: Decision, text: LocaleText) -> List[Block]:
    """One CategoryItem per rule, lettered by position; second output as a paragraph.

    The letter comes from the rule's position only, not from any letter in
    the rule's own output entries.
    """
    blocks: List[Block] = []
    table = decision.decision_table
    if table is None:
        return blocks
    for idx, rule in enumerate(table.rules):
        letter = sequential_letter(idx)
        outputs = rule.output_entries
        description = text.category_description(letter)
        if description is None:
            description = outputs[0] if outputs else ""
        blocks.append(CategoryItem(letter=letter, description=description))
        if len(outputs) > 1 and outputs[1].strip():
            blocks.extend(parse_section_text(outputs[1], text.keywords))
    return blocks


def _table_block(decision: Decision, default_title: str) -> TableBlock:
    table = decision.decision_table
    headers = tuple(table.headers())
    rows = []
    for rule in table.rules:
        cells = list(rule.cells)
        if len(cells) < len(headers):
            cells.extend([""] * (len(headers) - len(cells)))
        rows.append(tuple(cells))
    width = max([len(headers)] + [len(r) for r in rows])
    if len(headers) < width:
        headers = headers + ("",) * (width - len(headers))
    rows = [r + ("",) * (width - len(r)) for r in rows]
    return TableBlock(
        title=decision.display_name or default_title,
        headers=headers,
        rows=tuple(rows),
    )


def build_document_blocks(model: NormalizedModel,
                          include_decision_tables: bool = False) -> Tuple[Block, ...]:
    """Build the ordered block sequence for one model."""
    text = get_case_definition_config().locale(model.locale)
    blocks: List[Block] = []

    title = model.metadata.title
    if title:
        blocks.append(Heading(title, 0))

    blocks += _section_blocks(text.heading("clinical_picture"), model.clinical_picture, text)
    blocks += _section_blocks(text.heading("lab_evidence"), model.lab_evidence, text)
    blocks += _section_blocks(
        text.heading("additional_information"), model.additional_information, text,
    )

    # Epidemiological confirmation with the incubation period beneath it
    incubation = model.metadata.incubation_period
    if model.epi_confirmation is not None or incubation:
        blocks.append(Heading(text.heading("epi_confirmation"), 1))
        if model.epi_confirmation is not None:
            blocks += parse_section_text(model.epi_confirmation.text, text.keywords)
        if incubation:
            blocks.append(Paragraph(runs=(
                TextRun(f"{text.label('incubation_period')}: ", bold=True),
                TextRun(incubation),
            )))

    if model.classification is not None:
        blocks.append(Heading(text.heading("classification"), 1))
        blocks += category_blocks(model.classification, text)

    blocks += _section_blocks(
        text.heading("reference_definition"), model.reference_definition, text,
    )

    blocks.append(Heading(text.heading("legal_basis"), 1))
    blocks += _section_blocks(
        text.heading("reporting_obligation"), model.reporting_obligation, text, level=2,
    )
    blocks += _section_blocks(
        text.heading("transmission"), model.transmission, text, level=2,
    )

    if include_decision_tables:
        tabled = model.decisions_with_tables()
        if tabled:
            blocks.append(Heading(text.heading("decision_tables"), 1))
            for decision in tabled:
                table = _table_block(decision, text.label("decision"))
                blocks.append(Heading(table.title, 2))
                blocks.append(table)

    logger.debug(f"Built {len(blocks)} document blocks")
    return tuple(blocks)
