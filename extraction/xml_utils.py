"""
Namespace-agnostic element helpers.

Decision documents arrive with varying DMN namespace versions and vendor
prefixes, so every lookup matches on the local tag name only. Works with
both lxml and xml.etree elements; comments and processing instructions are
skipped.
"""

from typing import Iterator, List, Optional


def get_root(doc):
    """Return the root element of a parsed tree, or the element itself."""
    if hasattr(doc, "getroot"):
        return doc.getroot()
    return doc


def local_name(el) -> str:
    """Tag without namespace ('' for comments and processing instructions)."""
    tag = el.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def iter_named(root, name: str) -> Iterator:
    """All descendant elements (document order, root included) with this local name."""
    for el in root.iter():
        if local_name(el) == name:
            yield el


def children_named(el, name: str) -> List:
    """Direct child elements with this local name."""
    return [child for child in el if local_name(child) == name]


def first_child(el, name: str) -> Optional[object]:
    for child in el:
        if local_name(child) == name:
            return child
    return None


def first_descendant(el, name: str) -> Optional[object]:
    for desc in el.iter():
        if desc is not el and local_name(desc) == name:
            return desc
    return None


def text_content(el) -> str:
    """Concatenated text of an element and its descendants, stripped."""
    if el is None:
        return ""
    parts: List[str] = []
    _collect_text(el, parts)
    return "".join(parts).strip()


def _collect_text(el, parts: List[str]) -> None:
    if el.text and isinstance(el.tag, str):
        parts.append(el.text)
    for child in el:
        if isinstance(child.tag, str):
            _collect_text(child, parts)
        if child.tail:
            parts.append(child.tail)


def child_text(el, name: str) -> str:
    """Stripped text of the first direct child with this local name ('' if absent)."""
    return text_content(first_child(el, name))
