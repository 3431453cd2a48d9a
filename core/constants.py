"""Shared constants for the case-definition converter."""

SYSTEM_NAME = "dmn-case-definition"
VERSION = "1.2.0"

DOCX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
DEFAULT_LOCALE = "de"

# File suffixes used by the CLI host
DOCX_SUFFIX = ".docx"
TABLES_SUFFIX = "_tables.md"
