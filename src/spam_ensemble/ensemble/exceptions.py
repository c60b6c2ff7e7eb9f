"""
Exceptions raised by the merge engine.

These are programming errors in how the ensemble is wired, never runtime
conditions caused by input. Signal failures are not exceptions at all:
adapters degrade them to the empty prediction.
"""


class EnsembleError(Exception):
    """Base exception for ensemble misconfiguration."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class WeightContractViolation(EnsembleError):
    """
    Raised when a merge receives an invalid weight list.

    Either the number of weights differs from the number of predictions,
    or the weights of a non-empty merge do not sum to 1.0.
    """
    pass
