"""
Per-signal adapters.

Each adapter turns one classifier's raw output into a
ClassificationPrediction. Adapters fail open: an absent input, a
classifier exception or a label outside MailClassification all resolve to
the empty prediction, so a broken signal only removes its share of the
merge. Cancellation is never swallowed.
"""

import math
import time
from typing import Optional

import structlog

from spam_ensemble.classifiers.base import ImageClassifier, TextClassifier
from spam_ensemble.models.enums import MailClassification, SignalName
from spam_ensemble.models.prediction import ClassificationPrediction
from spam_ensemble.monitoring.metrics import signal_failures_total, signal_latency_seconds

logger = structlog.get_logger(__name__)


def fail_open(signal: SignalName, reason: str, **context) -> ClassificationPrediction:
    signal_failures_total.labels(signal=signal.value, reason=reason).inc()
    logger.warning("Signal degraded to empty prediction", signal=signal.value, reason=reason, **context)
    return ClassificationPrediction.empty()


async def predict_text(
    classifier: TextClassifier,
    text: Optional[str],
    signal: SignalName,
) -> ClassificationPrediction:
    """
    Classify text into a one-hot prediction.

    Args:
        classifier: Text classifier returning a single label identifier
        text: Subject or body; None or blank means the signal is absent
        signal: Which signal this is (for logs and metrics)

    Returns:
        {label: 1.0} for the returned label, or the empty prediction
    """
    if text is None or not text.strip():
        signal_failures_total.labels(signal=signal.value, reason="absent").inc()
        logger.debug("Signal absent", signal=signal.value)
        return ClassificationPrediction.empty()

    start = time.perf_counter()
    try:
        identifier = await classifier.classify(text)
    except Exception as e:
        return fail_open(
            signal, "classifier_error", error=str(e), error_type=type(e).__name__
        )
    finally:
        signal_latency_seconds.labels(signal=signal.value).observe(time.perf_counter() - start)

    label = MailClassification.parse(identifier) if isinstance(identifier, str) else None
    if label is None:
        return fail_open(signal, "unknown_label", identifier=repr(identifier))

    logger.debug("Signal resolved", signal=signal.value, label=label.value)
    return ClassificationPrediction({label: 1.0})


async def predict_image(classifier: ImageClassifier, data: bytes) -> ClassificationPrediction:
    """
    Classify one image into a per-label prediction.

    Labels the classifier did not report are set to 0.0. An empty result,
    a NaN, infinite or negative confidence, an identifier outside the label
    set or a classifier error yield the empty prediction.
    """
    signal = SignalName.ATTACHMENT_IMAGE
    if not data:
        return fail_open(signal, "absent")

    start = time.perf_counter()
    try:
        scores = await classifier.classify(data)
        confidences = {str(identifier): float(value) for identifier, value in (scores or {}).items()}
    except Exception as e:
        return fail_open(
            signal,
            "classifier_error",
            error=str(e),
            error_type=type(e).__name__,
            image_bytes=len(data),
        )
    finally:
        signal_latency_seconds.labels(signal=signal.value).observe(time.perf_counter() - start)

    if not confidences:
        return fail_open(signal, "empty_result", image_bytes=len(data))

    invalid = {i: v for i, v in confidences.items() if not math.isfinite(v) or v < 0.0}
    if invalid:
        return fail_open(signal, "invalid_confidence", confidences=repr(invalid))

    unknown = [i for i in confidences if MailClassification.parse(i) is None]
    if unknown:
        return fail_open(signal, "unknown_label", identifiers=unknown)

    return ClassificationPrediction(
        {label: confidences.get(label.value, 0.0) for label in MailClassification.variants()}
    )
