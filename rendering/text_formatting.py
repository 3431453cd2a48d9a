"""
Section text formatting - keyword annotation and paragraph parsing.

Turns raw section text into paragraph and list blocks:
  - "- item" / "• item" at line start      -> first-level list item
  - "  - item" (indented)                 -> second-level list item
  - any other non-blank line              -> paragraph with keyword emphasis

Keyword emphasis is isolated in annotate_keywords(), a pure function that
returns (text, emphasized) pairs, so the matcher can change without touching
block construction.
"""

import re
from typing import List, Sequence, Tuple

from .blocks import ListItem, Paragraph, TextRun


# XML 1.0 allows: #x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]
_ILLEGAL_XML_RE = re.compile(
    '[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x84\x86-\x9f'
    '\ud800-\udfff\ufdd0-\ufdef\ufffe\uffff]'
)

BULLET_GLYPHS = ("-", "–", "•")  # dash, en dash, bullet

_LIST_RE = re.compile(r'^(\s*)[' + re.escape("".join(BULLET_GLYPHS)) + r']\s*(.*)$')


def _sanitize_xml_text(text: str) -> str:
    """Strip characters that are illegal in XML 1.0 (used by python-docx)."""
    return _ILLEGAL_XML_RE.sub('', text)


def _find_first(line: str, keyword: str):
    """Span of the first whole-word occurrence of keyword, or None."""
    m = re.search(r'(?<!\w)' + re.escape(keyword) + r'(?!\w)', line)
    return m.span() if m else None


def annotate_keywords(line: str, keywords: Sequence[str]) -> List[Tuple[str, bool]]:
    """Split a line into (text, emphasized) runs.

    Keywords are located in list order, first occurrence only; a keyword
    whose first occurrence overlaps an already chosen span is not emphasized.
    Concatenating the run texts always gives back the original line.
    """
    spans: List[Tuple[int, int]] = []
    for kw in keywords:
        if not kw:
            continue
        span = _find_first(line, kw)
        if span is None:
            continue
        start, end = span
        if any(start < s_end and s_start < end for s_start, s_end in spans):
            continue
        spans.append(span)

    if not spans:
        return [(line, False)] if line else []

    runs: List[Tuple[str, bool]] = []
    pos = 0
    for start, end in sorted(spans):
        if start > pos:
            runs.append((line[pos:start], False))
        runs.append((line[start:end], True))
        pos = end
    if pos < len(line):
        runs.append((line[pos:], False))
    return runs


def parse_section_text(text: str, keywords: Sequence[str]) -> list:
    """Parse section text into ListItem and Paragraph blocks, one per non-blank line."""
    blocks = []
    for raw in text.splitlines():
        if not raw.strip():
            continue
        m = _LIST_RE.match(raw)
        if m:
            indent, content = m.groups()
            level = 2 if indent else 1
            blocks.append(ListItem(runs=(TextRun(content.strip()),), level=level))
            continue
        line = raw.strip()
        runs = tuple(
            TextRun(text=part, emphasized=emph)
            for part, emph in annotate_keywords(line, keywords)
        )
        blocks.append(Paragraph(runs=runs))
    return blocks
