"""LLM-backed text classifier for the subject and body signals."""

import json
from typing import Optional

import structlog
from pydantic import ValidationError

from spam_ensemble.classifiers.base import TextClassifier
from spam_ensemble.classifiers.exceptions import ClassifierResponseError, validation_messages
from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.prompt_builder import PromptBuilder
from spam_ensemble.models.output_models import TextLabelResponse

logger = structlog.get_logger(__name__)


class LLMTextClassifier(TextClassifier):
    """
    Ask a language model for the single best label of a text.

    The request carries a JSON Schema restricting the answer to
    {"label": <label>}. The returned identifier is passed through
    unchecked: mapping it onto the label set is the adapter's job.
    """

    def __init__(
        self,
        llm_client: BaseLLMClient,
        prompt_builder: PromptBuilder,
        model: str,
        field: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder
        self.model = model
        self.field = field
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def classify(self, text: str) -> str:
        request = self.prompt_builder.build_text_request(
            text,
            field=self.field,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        response = await self.llm_client.generate(request)

        try:
            payload = json.loads(response.content)
        except json.JSONDecodeError as e:
            raise ClassifierResponseError(
                "Text classifier returned invalid JSON",
                details={"model": self.model, "content_snippet": response.content[:100]},
            ) from e

        try:
            answer = TextLabelResponse.model_validate(payload)
        except ValidationError as e:
            raise ClassifierResponseError(
                f"Text classifier response failed validation: {e.error_count()} error(s)",
                details={"model": self.model, "errors": validation_messages(e)},
            ) from e

        label = answer.label.strip()
        logger.debug("Text classified", field=self.field, model=self.model, label=label)
        return label

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, field={self.field})"
