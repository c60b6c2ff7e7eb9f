"""
Async fan-out orchestrator.

AntiSpamEnsemble resolves the three top-level signals concurrently and
merges them under fixed weights once all of them are available:

    final = merge([body, subject, attachments], [0.5, 0.3, 0.2])
    attachments = merge_uniform([image_1, ..., image_N])

Every fan-out runs inside an asyncio.TaskGroup, which is the join barrier
(no merge on a partial set of results) and the cancellation scope
(abandoning predict() cancels every pending classifier call).

Usage:
    ensemble = AntiSpamEnsemble(body_clf, subject_clf, image_clf, settings)
    label, prediction = await ensemble.classify(mail)
"""

import asyncio
from dataclasses import dataclass
import time
from typing import Optional

import structlog

from spam_ensemble.classifiers.base import ImageClassifier, TextClassifier
from spam_ensemble.config import Settings
from spam_ensemble.ensemble.adapters import fail_open, predict_image, predict_text
from spam_ensemble.ensemble.merge import merge, merge_uniform
from spam_ensemble.models.enums import MailClassification, SignalName
from spam_ensemble.models.input_models import MailItem
from spam_ensemble.models.prediction import ClassificationPrediction
from spam_ensemble.monitoring.metrics import images_classified_total, predictions_total

logger = structlog.get_logger(__name__)

SIGNAL_ORDER: tuple[SignalName, ...] = (
    SignalName.BODY,
    SignalName.SUBJECT,
    SignalName.ATTACHMENTS,
)


@dataclass(frozen=True)
class EnsembleResult:
    """Outcome of one ensemble evaluation."""

    label: Optional[MailClassification]
    prediction: ClassificationPrediction
    signals: dict[SignalName, ClassificationPrediction]
    duration_ms: float


class AntiSpamEnsemble:
    """
    Ensemble predictor over body, subject and attachment signals.

    Attributes:
        body_classifier: Text classifier for the body
        subject_classifier: Text classifier for the subject
        image_classifier: Image classifier for attachment images
        signal_weights: Weights keyed by signal, summing to 1.0
        max_images: Images per mail beyond this count are ignored
        max_image_bytes: Larger images are skipped
    """

    def __init__(
        self,
        body_classifier: TextClassifier,
        subject_classifier: TextClassifier,
        image_classifier: ImageClassifier,
        settings: Settings,
    ):
        self.body_classifier = body_classifier
        self.subject_classifier = subject_classifier
        self.image_classifier = image_classifier
        self.signal_weights: dict[SignalName, float] = {
            SignalName.BODY: settings.BODY_WEIGHT,
            SignalName.SUBJECT: settings.SUBJECT_WEIGHT,
            SignalName.ATTACHMENTS: settings.ATTACHMENT_WEIGHT,
        }
        self.max_images = settings.MAX_IMAGES_PER_MAIL
        self.max_concurrent_images = settings.MAX_CONCURRENT_IMAGE_PREDICTIONS
        self.max_image_bytes = settings.MAX_IMAGE_BYTES

        logger.info(
            "AntiSpamEnsemble initialized",
            weights={s.value: w for s, w in self.signal_weights.items()},
            max_images=self.max_images,
            max_concurrent_images=self.max_concurrent_images,
        )

    async def predict_body(self, mail: MailItem) -> ClassificationPrediction:
        return await predict_text(self.body_classifier, mail.body, SignalName.BODY)

    async def predict_subject(self, mail: MailItem) -> ClassificationPrediction:
        return await predict_text(self.subject_classifier, mail.subject, SignalName.SUBJECT)

    async def predict_attachments(self, mail: MailItem) -> ClassificationPrediction:
        """
        Classify every classifiable image concurrently and merge uniformly.

        Images are dispatched as the source yields them. A mail without
        images, or whose image source fails, yields the empty prediction.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent_images)

        async def classify_one(data: bytes) -> ClassificationPrediction:
            async with semaphore:
                return await predict_image(self.image_classifier, data)

        tasks: list[asyncio.Task[ClassificationPrediction]] = []
        images = None
        try:
            images = mail.classifiable_images()
            async with asyncio.TaskGroup() as group:
                async for data in images:
                    if len(tasks) >= self.max_images:
                        logger.info("Image limit reached, ignoring remaining images", max_images=self.max_images)
                        break
                    if len(data) > self.max_image_bytes:
                        logger.info("Skipping oversized image", image_bytes=len(data), limit=self.max_image_bytes)
                        continue
                    images_classified_total.inc()
                    tasks.append(group.create_task(classify_one(data)))
        except Exception as e:
            # TaskGroup wraps a failure of the source loop in an ExceptionGroup
            cause = e.exceptions[0] if isinstance(e, ExceptionGroup) else e
            return fail_open(
                SignalName.ATTACHMENTS, "source_error", error=str(cause), error_type=type(cause).__name__
            )
        finally:
            aclose = getattr(images, "aclose", None)
            if aclose is not None:
                await aclose()

        if not tasks:
            logger.debug("No classifiable images")
        return merge_uniform([task.result() for task in tasks])

    async def predict_signals(self, mail: MailItem) -> dict[SignalName, ClassificationPrediction]:
        """Resolve body, subject and attachments concurrently; return once all are done."""
        async with asyncio.TaskGroup() as group:
            tasks = {
                SignalName.BODY: group.create_task(self.predict_body(mail)),
                SignalName.SUBJECT: group.create_task(self.predict_subject(mail)),
                SignalName.ATTACHMENTS: group.create_task(self.predict_attachments(mail)),
            }
        return {signal: tasks[signal].result() for signal in SIGNAL_ORDER}

    def combine(self, signals: dict[SignalName, ClassificationPrediction]) -> ClassificationPrediction:
        """Weighted merge of resolved signals; a missing signal counts as empty."""
        return merge(
            [signals.get(s, ClassificationPrediction.empty()) for s in SIGNAL_ORDER],
            [self.signal_weights[s] for s in SIGNAL_ORDER],
        )

    async def predict(self, mail: MailItem) -> ClassificationPrediction:
        """
        Final ensemble prediction for one mail.

        Never raises for a well-formed mail: failing signals contribute the
        empty prediction. WeightContractViolation propagates, since it means
        the ensemble itself is misconfigured.
        """
        return self.combine(await self.predict_signals(mail))

    async def evaluate(self, mail: MailItem) -> EnsembleResult:
        """Predict, select the label and keep the per-signal breakdown."""
        start = time.perf_counter()
        signals = await self.predict_signals(mail)
        prediction = self.combine(signals)
        label = prediction.prediction
        duration_ms = round((time.perf_counter() - start) * 1000, 2)

        predictions_total.labels(label=label.value if label else "none").inc()
        logger.info(
            "Ensemble prediction completed",
            label=label.value if label else None,
            confidence_levels=prediction.format_confidence_levels(),
            duration_ms=duration_ms,
        )
        return EnsembleResult(label=label, prediction=prediction, signals=signals, duration_ms=duration_ms)

    async def classify(
        self, mail: MailItem
    ) -> tuple[Optional[MailClassification], ClassificationPrediction]:
        """Predict and select the arg-max label (None when undecided)."""
        result = await self.evaluate(mail)
        return result.label, result.prediction
