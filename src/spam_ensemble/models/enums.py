"""
Enumerations for the spam ensemble.

The label set is a closed taxonomy: every external classifier output is
interpreted against it, and identifiers outside it are rejected.
"""

from enum import Enum
from typing import Optional


class MailClassification(str, Enum):
    """
    Closed taxonomy of mail classifications.

    Values are the identifiers external classifiers emit. Declaration order
    is the stable iteration order used for tie-breaking and display.
    """

    SPAM = "Spam"
    HAM = "Ham"

    @classmethod
    def variants(cls) -> list["MailClassification"]:
        """All labels in their stable order."""
        return list(cls)

    @classmethod
    def parse(cls, identifier: str) -> Optional["MailClassification"]:
        """Map an external identifier to a label, or None if it is not in the set."""
        try:
            return cls(identifier)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


class SignalName(str, Enum):
    """
    Independent sources of evidence about a mail.

    ATTACHMENT_IMAGE is one image inside the attachments signal.
    """

    BODY = "body"
    SUBJECT = "subject"
    ATTACHMENTS = "attachments"
    ATTACHMENT_IMAGE = "attachment_image"
