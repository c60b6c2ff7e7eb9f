"""
Merge engine: linear combination of confidence vectors.

One primitive, merge(), serves both levels of the ensemble: per-image
predictions are merged uniformly into the attachment signal, and the three
signals are merged with the configured weights.
"""

import math
from typing import Mapping, Optional, Sequence

from spam_ensemble.ensemble.exceptions import WeightContractViolation
from spam_ensemble.models.enums import MailClassification
from spam_ensemble.models.prediction import ClassificationPrediction

WEIGHT_SUM_TOLERANCE = 1e-9


def vector_from(mapping: Mapping[MailClassification | str, float]) -> ClassificationPrediction:
    """
    Build a prediction from a label -> confidence mapping.

    Raises:
        ValueError: If a key is not a label of MailClassification
    """
    return ClassificationPrediction(dict(mapping))


def merge(
    predictions: Sequence[ClassificationPrediction],
    weights: Sequence[float],
) -> ClassificationPrediction:
    """
    Weighted sum of predictions, computed for every label.

    Args:
        predictions: Predictions to combine
        weights: One weight per prediction, summing to 1.0 when non-empty

    Returns:
        Prediction holding every label, each sum(prediction[label] * weight)

    Raises:
        WeightContractViolation: Length mismatch, or weights not summing to 1.0
    """
    if len(predictions) != len(weights):
        raise WeightContractViolation(
            "Attempted to merge predictions with a mismatching number of weights",
            details={"predictions": len(predictions), "weights": len(weights)},
        )
    if predictions and not math.isclose(
        math.fsum(weights), 1.0, rel_tol=0.0, abs_tol=WEIGHT_SUM_TOLERANCE
    ):
        raise WeightContractViolation(
            "Attempted to merge predictions with weights not summing up to 1.0",
            details={"weights": list(weights), "sum": math.fsum(weights)},
        )

    return ClassificationPrediction(
        {
            label: math.fsum(
                prediction[label] * weight
                for prediction, weight in zip(predictions, weights)
            )
            for label in MailClassification.variants()
        }
    )


def merge_uniform(predictions: Sequence[ClassificationPrediction]) -> ClassificationPrediction:
    """Merge with equal weights; no predictions yields the empty prediction."""
    if not predictions:
        return ClassificationPrediction.empty()
    weight = 1.0 / len(predictions)
    return merge(predictions, [weight] * len(predictions))


def scale(prediction: ClassificationPrediction, factor: float) -> ClassificationPrediction:
    return prediction.weighted(factor)


def label_of(prediction: ClassificationPrediction) -> Optional[MailClassification]:
    """Arg-max label, or None when nothing supports a decision."""
    return prediction.prediction
