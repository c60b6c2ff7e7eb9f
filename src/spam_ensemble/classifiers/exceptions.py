"""
Exceptions for the classifier layer.

Adapters treat every classifier exception as a signal failure, so these
types exist for logging and for callers using classifiers directly.
"""

from pydantic import ValidationError


class ClassifierError(Exception):
    """Base exception for all classifier errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ClassifierResponseError(ClassifierError):
    """
    Raised when a classifier backend answers with output that cannot be
    interpreted (invalid JSON, missing fields, wrong types, out-of-range
    confidences).
    """
    pass


def validation_messages(error: ValidationError) -> list[str]:
    """Flatten a pydantic error into "loc: msg" lines for error details."""
    return [
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]
