"""
ConversionError hierarchy for the case-definition converter.

Provides typed exceptions so the host layer can tell configuration problems
from packaging failures without parsing message strings.

The core itself never raises for input-shape reasons: missing metadata,
unresolved references, missing role decisions and ragged rule rows are
recorded as Diagnostics on the NormalizedModel instead.

Hierarchy:
    ConversionError                     (base - all converter errors)
    ├── ConfigurationError              (bad styling file, unknown locale)
    ├── SerializationError              (DOCX packager failed - fatal)
    └── InputError                      (CLI only: unreadable / malformed file)
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for all converter errors."""

    def __init__(self, message: str, *, stage: Optional[str] = None,
                 source: Optional[str] = None, cause: Optional[Exception] = None):
        self.stage = stage
        self.source = source
        self.cause = cause
        super().__init__(message)
        if cause and not self.__cause__:
            self.__cause__ = cause

    def to_dict(self) -> dict:
        """Structured representation for logging."""
        d = {
            "error_type": type(self).__name__,
            "message": str(self),
        }
        if self.stage:
            d["stage"] = self.stage
        if self.source:
            d["source"] = self.source
        if self.cause:
            d["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return d


class ConfigurationError(ConversionError):
    """Invalid styling option, malformed colour, unknown locale."""
    pass


class SerializationError(ConversionError):
    """The DOCX packager failed. Never retried, no partial output."""

    def __init__(self, message: str = "DOCX serialization failed", **kwargs):
        kwargs.setdefault("stage", "package")
        super().__init__(message, **kwargs)


class InputError(ConversionError):
    """Input file could not be read or is not well-formed XML (CLI host only)."""
    pass
