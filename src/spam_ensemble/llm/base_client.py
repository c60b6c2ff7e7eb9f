"""
Inference server interface used by the LLM-backed classifiers.

Classifiers only ever call generate(); swapping Ollama for another server
means writing one subclass, nothing in the ensemble changes.
"""

from abc import ABC, abstractmethod
from typing import Iterable

import structlog

from spam_ensemble.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    One connection to an inference server, shared by all classifiers.

    Subclasses own transport, retries and response decoding. Interpreting
    the generated text is left to the classifiers.
    """

    def __init__(self, base_url: str, timeout: int = 60, max_retries: int = 2):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries

        logger.info(
            "LLM client created",
            client_class=type(self).__name__,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Run one completion.

        Raises:
            LLMClientError: Any subclass; ``retryable`` tells whether the
                client already gave up after repeating the request
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Whether the server answers; returns False instead of raising."""

    @abstractmethod
    async def list_models(self) -> list[str]:
        """Names of the models the server can run."""

    async def missing_models(self, required: Iterable[str]) -> list[str]:
        """
        Required models the server does not have, in the order given.

        An untagged name matches the server's ":latest" tag.

        Raises:
            LLMConnectionError: If the model list cannot be fetched
        """
        available = set(await self.list_models())
        return [
            name for name in dict.fromkeys(required)
            if name not in available and f"{name}:latest" not in available
        ]

    async def close(self):
        logger.debug("Closing LLM client", client_class=type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url}, timeout={self.timeout}s)"
