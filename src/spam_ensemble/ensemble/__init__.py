"""
Ensemble engine: merge primitives, per-signal adapters and the orchestrator.

Components:
- merge: vector_from, merge, merge_uniform, scale, label_of
- adapters: predict_text, predict_image (fail-open)
- orchestrator: AntiSpamEnsemble (concurrent fan-out + weighted merge)
- exceptions: EnsembleError, WeightContractViolation
"""

from spam_ensemble.ensemble.adapters import predict_image, predict_text
from spam_ensemble.ensemble.exceptions import EnsembleError, WeightContractViolation
from spam_ensemble.ensemble.merge import label_of, merge, merge_uniform, scale, vector_from
from spam_ensemble.ensemble.orchestrator import AntiSpamEnsemble, EnsembleResult

__all__ = [
    "AntiSpamEnsemble",
    "EnsembleResult",
    "EnsembleError",
    "WeightContractViolation",
    "label_of",
    "merge",
    "merge_uniform",
    "predict_image",
    "predict_text",
    "scale",
    "vector_from",
]
