"""
Input data models for the spam ensemble.

MailContent is the item source: it supplies the subject, the body and the
classifiable attachment images the orchestrator fans out over. It can be
built directly or parsed from a raw RFC 5322 message.
"""

import re
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import AsyncIterator, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from spam_ensemble.models.exceptions import MailParseError

DEFAULT_IMAGE_TYPES: tuple[str, ...] = ("image/png", "image/jpeg", "image/gif", "image/webp")

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"[ \t]+")


@runtime_checkable
class MailItem(Protocol):
    """Anything the orchestrator can classify."""

    @property
    def body(self) -> Optional[str]: ...

    @property
    def subject(self) -> Optional[str]: ...

    def classifiable_images(self) -> AsyncIterator[bytes]: ...


class MailAttachment(BaseModel):
    """A single decoded attachment."""

    model_config = ConfigDict(frozen=True)

    filename: Optional[str] = Field(default=None, description="Filename from Content-Disposition")
    content_type: str = Field(..., description="MIME type (e.g., image/png)")
    data: bytes = Field(default=b"", description="Decoded payload")

    @property
    def size(self) -> int:
        return len(self.data)


class MailContent(BaseModel):
    """
    Mail item handed to the ensemble.

    Absent subject or body is a valid state; the matching signal then
    contributes nothing to the merge.
    """

    model_config = ConfigDict(frozen=True)

    subject: Optional[str] = Field(default=None, description="Decoded Subject header")
    body: Optional[str] = Field(default=None, description="Plain-text body")
    attachments: list[MailAttachment] = Field(default_factory=list)
    image_types: tuple[str, ...] = Field(
        default=DEFAULT_IMAGE_TYPES,
        description="MIME types treated as classifiable images"
    )

    async def classifiable_images(self) -> AsyncIterator[bytes]:
        """Yield the payload of every non-empty attachment with an image type."""
        accepted = {t.lower() for t in self.image_types}
        for attachment in self.attachments:
            if attachment.content_type.lower() in accepted and attachment.data:
                yield attachment.data

    @classmethod
    def from_bytes(
        cls, raw: bytes, image_types: Optional[tuple[str, ...] | list[str]] = None
    ) -> "MailContent":
        """
        Parse a raw RFC 5322 message.

        The body is the preferred text/plain part, falling back to text/html
        with tags stripped. Every non-body leaf part becomes an attachment.

        Raises:
            MailParseError: If the message cannot be parsed at all
        """
        if not raw or not raw.strip():
            raise MailParseError("Empty message")

        try:
            message: EmailMessage = BytesParser(policy=policy.default).parsebytes(raw)
        except (TypeError, ValueError) as e:
            raise MailParseError(
                f"Unable to parse message: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        subject = message.get("Subject")
        body_part = message.get_body(preferencelist=("plain", "html"))
        attachments = [
            MailAttachment(
                filename=part.get_filename(),
                content_type=part.get_content_type(),
                data=part.get_payload(decode=True) or b"",
            )
            for part in message.walk()
            if part is not body_part and _is_attachment(part)
        ]

        return cls(
            subject=str(subject).strip() if subject else None,
            body=_extract_body(body_part),
            attachments=attachments,
            image_types=tuple(image_types) if image_types else DEFAULT_IMAGE_TYPES,
        )


def _is_attachment(part: EmailMessage) -> bool:
    if part.is_multipart():
        return False
    return (
        part.is_attachment()
        or part.get_filename() is not None
        or part.get_content_maintype() == "image"
    )


def _extract_body(part: Optional[EmailMessage]) -> Optional[str]:
    if part is None:
        return None
    try:
        content = part.get_content()
    except (LookupError, UnicodeDecodeError):
        # Unknown charset: decode leniently
        payload = part.get_payload(decode=True) or b""
        content = payload.decode("utf-8", errors="replace")
    if not isinstance(content, str):
        return None
    if part.get_content_subtype() == "html":
        content = _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", content))
    content = content.strip()
    return content or None
