"""
Abstract document blocks.

The Document Renderer first builds an ordered tuple of these blocks from a
NormalizedModel (pure, format-independent), then hands them to the DOCX
packager. Tests inspect the blocks directly.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class TextRun:
    text: str
    emphasized: bool = False
    bold: bool = False


@dataclass(frozen=True)
class Heading:
    """Level 0 is the document title."""
    text: str
    level: int = 1


@dataclass(frozen=True)
class Paragraph:
    runs: Tuple[TextRun, ...]

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


@dataclass(frozen=True)
class ListItem:
    """Bullet list item; level 1 or 2."""
    runs: Tuple[TextRun, ...]
    level: int = 1

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


@dataclass(frozen=True)
class CategoryItem:
    """One enumerated case category: sequential letter plus its description."""
    letter: str
    description: str

    @property
    def text(self) -> str:
        return f"{self.letter}. {self.description}"


@dataclass(frozen=True)
class TableBlock:
    title: str
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]


Block = Union[Heading, Paragraph, ListItem, CategoryItem, TableBlock]


def block_text(block: Block) -> str:
    """Plain text of a block (tables flattened row by row)."""
    if isinstance(block, TableBlock):
        lines = [" | ".join(block.headers)]
        lines.extend(" | ".join(row) for row in block.rows)
        return "\n".join(lines)
    return block.text
