"""
Exceptions raised by the scoring core.

ValidationError is caller-correctable and terminal for the request that
produced it; the transport maps it to a 422 answer.
"""
from typing import Optional


class QualificationError(Exception):
    """Base exception for the qualification calculator."""

    pass


class ValidationError(QualificationError):
    """Application record rejected by the strict validation step."""

    def __init__(self, code: str, field: Optional[str] = None):
        self.code = code
        self.field = field
        message = code if field is None else f"{code}: {field}"
        super().__init__(message)


class GridConfigurationError(QualificationError):
    """Point table or policy file cannot be turned into rules."""

    pass
