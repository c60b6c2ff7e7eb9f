"""
API-specific request and response models for FastAPI endpoints.

These models wrap the core domain models (MailContent, ClassificationPrediction)
with transport encoding and response metadata.
"""

from datetime import datetime, timezone
from typing import Optional, Sequence

from pydantic import Base64Bytes, BaseModel, Field

from spam_ensemble.ensemble.orchestrator import EnsembleResult
from spam_ensemble.models.enums import MailClassification
from spam_ensemble.models.input_models import MailAttachment, MailContent


class AttachmentPayload(BaseModel):
    """Attachment with a base64-encoded payload."""

    filename: Optional[str] = Field(default=None, description="Original filename")
    content_type: str = Field(..., description="MIME type", examples=["image/png"])
    data: Base64Bytes = Field(..., description="Base64-encoded content")


class PredictRequest(BaseModel):
    """Request for the JSON prediction endpoint."""

    subject: Optional[str] = Field(default=None, description="Subject line")
    body: Optional[str] = Field(default=None, description="Plain-text body")
    attachments: list[AttachmentPayload] = Field(
        default_factory=list,
        max_length=100,
        description="Attachments; only image types are classified"
    )

    def to_mail_content(self, image_types: Sequence[str]) -> MailContent:
        return MailContent(
            subject=self.subject,
            body=self.body,
            attachments=[
                MailAttachment(filename=a.filename, content_type=a.content_type, data=a.data)
                for a in self.attachments
            ],
            image_types=tuple(image_types),
        )


class PredictResponse(BaseModel):
    """Ensemble prediction with per-signal breakdown."""

    label: Optional[MailClassification] = Field(
        description="Arg-max label, null when no signal supports a decision"
    )
    confidence_levels: dict[str, float] = Field(
        description="Final confidence for every label"
    )
    formatted: list[str] = Field(
        default_factory=list,
        description="Percentage rendering sorted by label",
        examples=[["Ham: 30.0%", "Spam: 50.0%"]]
    )
    signals: dict[str, dict[str, float]] = Field(
        description="Confidence per label for each signal before weighting"
    )
    duration_ms: float = Field(ge=0.0, description="Time spent in the ensemble")

    @classmethod
    def from_result(cls, result: EnsembleResult) -> "PredictResponse":
        return cls(
            label=result.label,
            confidence_levels=result.prediction.to_dict(),
            formatted=result.prediction.format_confidence_levels(),
            signals={signal.value: p.to_dict() for signal, p in result.signals.items()},
            duration_ms=result.duration_ms,
        )


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall status: healthy, unhealthy",
        examples=["healthy", "unhealthy"]
    )
    version: str = Field(description="Application version")
    services: dict[str, str] = Field(description="Status of each backing service")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LabelsResponse(BaseModel):
    """The closed label set in its stable order."""

    labels: list[str]
