"""
Typed shape of the classifier answers produced by the LLM.

The prompt builder sends an equivalent JSON Schema with every request; these
models check the answer on the way back. Label identifiers stay plain
strings here: mapping them onto MailClassification is the adapters' job.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

Confidence = Annotated[float, Field(ge=0.0, le=1.0, allow_inf_nan=False)]


class TextLabelResponse(BaseModel):
    """Single best label for a subject or body."""

    model_config = ConfigDict(extra="forbid")

    label: str = Field(..., description="Label identifier chosen by the model")


class ImageConfidenceResponse(BaseModel):
    """Per-label confidences for one attachment image."""

    model_config = ConfigDict(extra="forbid")

    confidences: dict[str, Confidence] = Field(
        ...,
        description="Label identifier -> confidence in [0, 1], finite"
    )
