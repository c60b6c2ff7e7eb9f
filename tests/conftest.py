"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import asyncio
from email.message import EmailMessage
from typing import Optional

import pytest

from spam_ensemble.classifiers.base import ImageClassifier, TextClassifier
from spam_ensemble.config import Settings
from spam_ensemble.models.input_models import MailAttachment, MailContent

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 24


class StubTextClassifier(TextClassifier):
    """Returns a fixed identifier (or raises) after an optional delay."""

    def __init__(self, label: Optional[str] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.label = label
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    async def classify(self, text: str) -> str:
        self.calls.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.label


class StubImageClassifier(ImageClassifier):
    """Returns confidences looked up by image bytes, or a default."""

    def __init__(
        self,
        by_image: Optional[dict[bytes, dict[str, float]]] = None,
        default: Optional[dict[str, float]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.by_image = by_image or {}
        self.default = default if default is not None else {}
        self.error = error
        self.delay = delay
        self.calls: list[bytes] = []

    async def classify(self, data: bytes) -> dict[str, float]:
        self.calls.append(data)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.by_image.get(data, self.default)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            settings = test_settings.model_copy(update={"MAX_IMAGES_PER_MAIL": 2})
    """
    return Settings(
        # === Application ===
        APP_NAME="Spam Ensemble (Test)",
        APP_VERSION="0.1.0",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Ollama ===
        OLLAMA_BASE_URL="http://localhost:11434",
        OLLAMA_TIMEOUT=5,
        OLLAMA_MAX_RETRIES=2,

        # === Ensemble ===
        BODY_WEIGHT=0.5,
        SUBJECT_WEIGHT=0.3,
        ATTACHMENT_WEIGHT=0.2,
        MAX_IMAGES_PER_MAIL=16,
        MAX_CONCURRENT_IMAGE_PREDICTIONS=4,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def sample_mail() -> MailContent:
    """Mail with subject, body and two image attachments."""
    return MailContent(
        subject="You won a prize",
        body="Click the link below to claim your reward.",
        attachments=[
            MailAttachment(filename="a.png", content_type="image/png", data=PNG_BYTES),
            MailAttachment(filename="b.jpg", content_type="image/jpeg", data=JPEG_BYTES),
            MailAttachment(filename="terms.pdf", content_type="application/pdf", data=b"%PDF-1.4"),
        ],
    )


@pytest.fixture
def sample_raw_email() -> bytes:
    """Multipart RFC 5322 message with a plain body and one PNG attachment."""
    message = EmailMessage()
    message["From"] = "promo@example.com"
    message["To"] = "user@example.org"
    message["Subject"] = "Limited offer"
    message.set_content("Buy now and save 90 percent.\n")
    message.add_attachment(PNG_BYTES, maintype="image", subtype="png", filename="banner.png")
    return message.as_bytes()


@pytest.fixture
def text_stub():
    """StubTextClassifier class, instantiated per test with the wanted behaviour."""
    return StubTextClassifier


@pytest.fixture
def image_stub():
    """StubImageClassifier class, instantiated per test with the wanted behaviour."""
    return StubImageClassifier
