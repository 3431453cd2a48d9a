"""
Metadata Extractor - flat metadata fields from the extension container.

Looks up the metadata container (preferring one nested in extensionElements)
and reads each recognized field from its direct children. A missing field is
left as None; nothing here raises.
"""

import logging
from typing import List

from core.case_definition_config import CaseDefinitionConfig, get_case_definition_config

from .schema import Metadata
from .xml_utils import get_root, iter_named, local_name, text_content

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("disease", "pathogen", "reference_date", "version")


def _find_container(root, container_name: str):
    for ext in iter_named(root, "extensionElements"):
        for el in iter_named(ext, container_name):
            return el
    for el in iter_named(root, container_name):
        return el
    return None


def extract_metadata(doc, config: CaseDefinitionConfig = None) -> Metadata:
    """Read the recognized metadata fields from a parsed decision document."""
    config = config or get_case_definition_config()
    root = get_root(doc)

    container = _find_container(root, config.metadata_container)
    if container is None:
        logger.debug("No metadata container found")
        return Metadata()

    values = {}
    for key, aliases in config.metadata_aliases().items():
        wanted = {a.casefold() for a in aliases}
        for child in container:
            if local_name(child).casefold() in wanted:
                values[key] = text_content(child)
                break

    metadata = Metadata(**values)
    logger.debug(f"Extracted metadata fields: {sorted(values)}")
    return metadata


def missing_metadata_fields(metadata: Metadata) -> List[str]:
    """Required metadata keys that are absent (None)."""
    return [key for key in REQUIRED_FIELDS if getattr(metadata, key) is None]
