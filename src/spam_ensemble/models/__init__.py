"""
Data models for the spam ensemble.

Includes:
- MailClassification (closed label set)
- ClassificationPrediction (immutable confidence vector)
- Input models (MailContent, MailAttachment, MailItem protocol)
- LLM models (LLMGenerationRequest, LLMGenerationResponse)
- Output models (TextLabelResponse, ImageConfidenceResponse)
"""

from spam_ensemble.models.enums import MailClassification, SignalName
from spam_ensemble.models.exceptions import MailParseError
from spam_ensemble.models.input_models import MailAttachment, MailContent, MailItem
from spam_ensemble.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from spam_ensemble.models.output_models import ImageConfidenceResponse, TextLabelResponse
from spam_ensemble.models.prediction import ClassificationPrediction

__all__ = [
    "MailClassification",
    "SignalName",
    "ClassificationPrediction",
    "MailAttachment",
    "MailContent",
    "MailItem",
    "MailParseError",
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    "TextLabelResponse",
    "ImageConfidenceResponse",
]
