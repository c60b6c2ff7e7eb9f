"""LLM-backed image classifier for attachment images."""

import json
from typing import Optional

import structlog
from pydantic import ValidationError

from spam_ensemble.classifiers.base import ImageClassifier
from spam_ensemble.classifiers.exceptions import ClassifierResponseError, validation_messages
from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.prompt_builder import PromptBuilder
from spam_ensemble.models.output_models import ImageConfidenceResponse

logger = structlog.get_logger(__name__)


class LLMImageClassifier(ImageClassifier):
    """
    Ask a vision model for per-label confidences of one image.

    Image bytes are sent as-is (base64); nothing is decoded locally. A
    malformed image surfaces as a generation error from the server.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: PromptBuilder,
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def classify(self, data: bytes) -> dict[str, float]:
        request = self.prompt_builder.build_image_request(
            data,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        response = await self.llm_client.generate(request)

        try:
            payload = json.loads(response.content)
        except json.JSONDecodeError as e:
            raise ClassifierResponseError(
                "Image classifier returned invalid JSON",
                details={"model": self.model, "content_snippet": response.content[:100]},
            ) from e

        try:
            answer = ImageConfidenceResponse.model_validate(payload)
        except ValidationError as e:
            raise ClassifierResponseError(
                f"Image classifier response failed validation: {e.error_count()} error(s)",
                details={"model": self.model, "errors": validation_messages(e)},
            ) from e

        scores = dict(answer.confidences)
        logger.debug("Image classified", model=self.model, image_bytes=len(data), confidences=scores)
        return scores

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
