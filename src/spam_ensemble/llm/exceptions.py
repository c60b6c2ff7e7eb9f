"""
Errors raised by the LLM client layer.

Each class states whether repeating the same request can help
(``retryable``); OllamaClient retries on that flag alone. The ensemble
adapters never look at these types: any of them turns the affected signal
into the empty prediction.
"""


class LLMClientError(Exception):
    """Base class; carries a message and structured details for logging."""

    retryable: bool = False

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """The inference server could not be reached (DNS, refused, reset)."""

    retryable = True


class LLMTimeoutError(LLMConnectionError):
    """No answer within the configured timeout."""


class LLMGenerationError(LLMClientError):
    """
    The server answered, but not with a usable completion.

    Rejected parameters, unparseable bodies and empty completions land here.
    """


class LLMServerError(LLMGenerationError):
    """5xx answer; the server may recover, so the request is repeated."""

    retryable = True


class LLMModelNotAvailableError(LLMGenerationError):
    """The requested model is not pulled on the server."""
