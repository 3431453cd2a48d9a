"""
Tabular Renderer - every decision table as a column-aligned pipe table.

Output layout:

    # <disease> (<pathogen>)
    **<reference date label>:** <value>
    **Version:** <value>

    ## <decision label>

    | <input 1> | <output 1>  |
    | --------- | ----------- |
    | <entry>   | <entry>     |

Column width is the widest of the header and every cell in that column;
every cell is right-padded with spaces so the raw text stays aligned.
Rows shorter than the header get empty trailing cells. Rows longer than the
header add columns with blank headers, so no cell is ever dropped. Line
breaks inside a cell collapse to one space and "|" is escaped, so every
row stays on one physical line with the same column count. Tables without
any column are skipped.
"""

import logging
import re
from typing import List, Sequence, Tuple

from core.case_definition_config import get_case_definition_config
from extraction.schema import DecisionTable, Diagnostic, DiagnosticKind, NormalizedModel

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\s*(?:\r\n|\r|\n)\s*")


def calculate_column_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> List[int]:
    """Width per column: max of header text and every cell in that column."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    return widths


def pad_cell(text: str, width: int) -> str:
    return text + " " * max(0, width - len(text))


def clean_cell(text: str) -> str:
    """One-line cell text: line breaks become a single space, "|" becomes "\\|"."""
    return _LINE_BREAK_RE.sub(" ", text).replace("|", r"\|")


def _format_row(cells: Sequence[str], widths: Sequence[int]) -> str:
    return "| " + " | ".join(pad_cell(c, w) for c, w in zip(cells, widths)) + " |"


def normalize_rows(table: DecisionTable, decision_id: str = "") -> Tuple[List[str], List[List[str]], List[Diagnostic]]:
    """Header and rule rows squared to one column count.

    Short rows are padded with '' cells, long rows widen the header with ''.
    Each mismatch is reported as a MALFORMED_RULE_ROW diagnostic.
    """
    headers = [clean_cell(h) for h in table.headers()]
    rows = [[clean_cell(c) for c in rule.cells] for rule in table.rules]
    diagnostics = []
    for idx, row in enumerate(rows, 1):
        if len(row) != len(headers):
            diagnostics.append(Diagnostic(
                kind=DiagnosticKind.MALFORMED_RULE_ROW,
                message=(f"Rule {idx} of '{decision_id}' has {len(row)} cells "
                         f"for {len(headers)} columns"),
                subject_id=decision_id,
            ))

    width = max([len(headers)] + [len(r) for r in rows])
    headers = headers + [""] * (width - len(headers))
    rows = [r + [""] * (width - len(r)) for r in rows]
    return headers, rows, diagnostics


def format_decision_table(table: DecisionTable, title: str, decision_id: str = "") -> str:
    """One '## title' block with header, separator and rule rows."""
    headers, rows, diagnostics = normalize_rows(table, decision_id)
    if not headers:
        logger.debug(f"Skipping decision table '{decision_id}' without columns")
        return ""
    for diag in diagnostics:
        logger.debug(diag.message)

    widths = calculate_column_widths(headers, rows)
    lines = [f"## {title}", ""]
    lines.append(_format_row(headers, widths))
    lines.append("| " + " | ".join("-" * w for w in widths) + " |")
    for row in rows:
        lines.append(_format_row(row, widths))
    return "\n".join(lines) + "\n\n"


def render_markdown_tables(model: NormalizedModel) -> str:
    """Render the metadata preamble and every decision table in decision order."""
    text = get_case_definition_config().locale(model.locale)
    meta = model.metadata
    out = ""

    if meta.title:
        out += f"# {meta.title}\n\n"
    if meta.reference_date:
        out += f"**{text.label('reference_date')}:** {meta.reference_date}  \n"
    if meta.version:
        out += f"**{text.label('version')}:** {meta.version}  \n"
    out += "\n"

    tables = 0
    for decision in model.decisions:
        if decision.decision_table is None:
            continue
        title = decision.label or decision.name or text.label("decision")
        block = format_decision_table(decision.decision_table, title, decision.id)
        if block:
            out += block
            tables += 1

    logger.info(f"Tabular document rendered: {tables} decision tables")
    return out
