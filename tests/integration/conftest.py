"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if external services are available.
Integration tests are skipped if required services are not running.
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from spam_ensemble.api.dependencies import get_ensemble, get_llm_client
from spam_ensemble.ensemble.orchestrator import AntiSpamEnsemble
from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.main import app


@pytest.fixture(scope="session")
def check_ollama():
    """Check if Ollama is available at localhost:11434.

    Skips tests if Ollama is not reachable.
    """
    try:
        response = httpx.get("http://localhost:11434/api/tags", timeout=5)
        if response.status_code != 200:
            pytest.skip("Ollama not available (non-200 status)")
    except Exception as e:
        pytest.skip(f"Ollama not available: {e}")


@pytest.fixture
def stub_ensemble(test_settings, text_stub, image_stub) -> AntiSpamEnsemble:
    """Ensemble over stubs: body Spam, subject Ham, every image Spam."""
    return AntiSpamEnsemble(
        body_classifier=text_stub("Spam"),
        subject_classifier=text_stub("Ham"),
        image_classifier=image_stub(default={"Spam": 1.0}),
        settings=test_settings,
    )


@pytest.fixture
def healthy_llm_client():
    mock = AsyncMock(spec=BaseLLMClient)
    mock.health_check = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def api_client(stub_ensemble, healthy_llm_client):
    """TestClient with the ensemble and LLM client replaced by test doubles."""
    app.dependency_overrides[get_ensemble] = lambda: stub_ensemble
    app.dependency_overrides[get_llm_client] = lambda: healthy_llm_client
    yield TestClient(app)
    app.dependency_overrides.clear()
