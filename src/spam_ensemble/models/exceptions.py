"""Exceptions raised while building mail items from raw input."""


class MailParseError(Exception):
    """Raised when a raw message cannot be decoded into a MailContent."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
