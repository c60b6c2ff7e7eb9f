"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import json
from unittest.mock import AsyncMock

import pytest

from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.prompt_builder import PromptBuilder
from spam_ensemble.models.llm_models import LLMGenerationResponse


@pytest.fixture
def llm_response():
    """Factory wrapping a payload (dict or raw string) into a generation response."""
    def _make(content) -> LLMGenerationResponse:
        return LLMGenerationResponse(
            content=content if isinstance(content, str) else json.dumps(content),
            model_version="qwen2.5:7b",
            finish_reason="stop",
            prompt_tokens=120,
            completion_tokens=8,
            latency_ms=42,
        )
    return _make


@pytest.fixture
def mock_llm_client(llm_response):
    """Mock LLM client; set generate.return_value per test."""
    mock = AsyncMock(spec=BaseLLMClient)
    mock.generate = AsyncMock(return_value=llm_response({"label": "Spam"}))
    mock.health_check = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    """Prompt builder over the packaged templates."""
    return PromptBuilder(body_truncation_limit=200)
