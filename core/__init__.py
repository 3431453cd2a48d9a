"""
Core utilities for the case-definition converter.

- Typed error hierarchy
- Logging configuration
- Case-definition vocabulary (YAML) and styling configuration
- Constants
"""

from .constants import (
    SYSTEM_NAME,
    VERSION,
    DOCX_CONTENT_TYPE,
    DEFAULT_LOCALE,
)
from .errors import (
    ConversionError,
    ConfigurationError,
    SerializationError,
    InputError,
)
from .case_definition_config import (
    CaseDefinitionConfig,
    LocaleText,
    get_case_definition_config,
    load_case_definition_config,
)
from .styling import StylingConfig, load_styling

__all__ = [
    "SYSTEM_NAME",
    "VERSION",
    "DOCX_CONTENT_TYPE",
    "DEFAULT_LOCALE",
    "ConversionError",
    "ConfigurationError",
    "SerializationError",
    "InputError",
    "CaseDefinitionConfig",
    "LocaleText",
    "get_case_definition_config",
    "load_case_definition_config",
    "StylingConfig",
    "load_styling",
]
