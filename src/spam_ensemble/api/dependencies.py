"""
FastAPI dependency injection for the spam ensemble.

Provides singleton instances of expensive resources (LLM client, prompt
builder, ensemble). Tests replace them through app.dependency_overrides.
"""

from functools import lru_cache

from spam_ensemble.classifiers.llm_image import LLMImageClassifier
from spam_ensemble.classifiers.llm_text import LLMTextClassifier
from spam_ensemble.config import Settings, settings
from spam_ensemble.ensemble.orchestrator import AntiSpamEnsemble
from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.ollama_client import OllamaClient
from spam_ensemble.llm.prompt_builder import PromptBuilder
from spam_ensemble.models.enums import SignalName


@lru_cache()
def get_settings() -> Settings:
    """Get settings singleton."""
    return settings


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton LLM client with connection pooling.

    One client is shared by all three classifiers.
    """
    current = get_settings()
    return OllamaClient(
        base_url=current.OLLAMA_BASE_URL,
        timeout=current.OLLAMA_TIMEOUT,
        max_retries=current.OLLAMA_MAX_RETRIES,
    )


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """Get singleton prompt builder (templates are loaded once)."""
    current = get_settings()
    return PromptBuilder(
        body_truncation_limit=current.BODY_TRUNCATION_LIMIT,
        default_temperature=current.LLM_TEMPERATURE,
        default_max_tokens=current.LLM_MAX_TOKENS,
    )


@lru_cache()
def get_ensemble() -> AntiSpamEnsemble:
    """
    Get singleton ensemble wired to LLM-backed classifiers.

    The ensemble holds no per-request state, so one instance serves
    concurrent requests.
    """
    current = get_settings()
    client = get_llm_client()
    builder = get_prompt_builder()
    return AntiSpamEnsemble(
        body_classifier=LLMTextClassifier(client, builder, current.BODY_MODEL, SignalName.BODY.value),
        subject_classifier=LLMTextClassifier(client, builder, current.SUBJECT_MODEL, SignalName.SUBJECT.value),
        image_classifier=LLMImageClassifier(client, builder, current.ATTACHMENT_MODEL),
        settings=current,
    )
