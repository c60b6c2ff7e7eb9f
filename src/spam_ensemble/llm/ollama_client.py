"""
Ollama backend for the LLM-backed classifiers.

Talks to /api/generate (non-streaming, output constrained by a JSON Schema
in the format field, images as base64) and /api/tags (health and model
listing) over one pooled httpx.AsyncClient.
"""

import asyncio
import json
import time
from typing import Any, Dict, Optional
import httpx
import structlog

from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMServerError,
    LLMTimeoutError,
)
from spam_ensemble.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from spam_ensemble.monitoring.metrics import llm_latency_seconds, llm_tokens_total


logger = structlog.get_logger(__name__)


class OllamaClient(BaseLLMClient):
    """
    Async Ollama client shared by the text and image classifiers.

    Timeouts, network errors and 5xx answers are retried with exponential
    backoff; a missing model, a rejected request or an unusable body is
    raised at once.
    """

    def __init__(
        self,
        base_url: str = "http://ollama:11434",
        timeout: int = 60,
        max_retries: int = 2,
        retry_backoff: float = 1.0,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            max_retries: Connection-level attempts for network errors
            retry_backoff: First backoff in seconds, doubled on each retry
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(base_url, timeout, max_retries)
        self.retry_backoff = retry_backoff

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )

        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                follow_redirects=True
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    def _build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "prompt": request.prompt,
            "stream": False,
            "format": request.format_schema or "json",
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            }
        }
        if request.system:
            payload["system"] = request.system
        if request.images:
            payload["images"] = list(request.images)
        if request.seed is not None:
            payload["options"]["seed"] = request.seed
        return payload

    async def _backoff(self, attempt: int, reason: str) -> None:
        delay = self.retry_backoff * (2 ** (attempt - 1))
        logger.info("Retrying Ollama request", reason=reason, attempt=attempt, backoff_seconds=delay)
        await asyncio.sleep(delay)

    async def _post_generate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        One POST /api/generate, with httpx failures mapped onto LLMClientError.

        Returns the decoded response body.
        """
        model = payload["model"]
        try:
            client = await self._get_client()
            response = await client.post("/api/generate", json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as e:
            raise LLMTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"model": model, "timeout": self.timeout},
            ) from e
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            details = {"model": model, "status": status_code, "error": e.response.text[:500]}
            if status_code == 404:
                raise LLMModelNotAvailableError(f"Model not found: {model}", details=details) from e
            if status_code >= 500:
                raise LLMServerError(f"Ollama server error: {status_code}", details=details) from e
            raise LLMGenerationError(f"Ollama client error: {status_code}", details=details) from e
        except httpx.TransportError as e:
            raise LLMConnectionError(
                f"Network error: {e}",
                details={"model": model, "error_type": type(e).__name__},
            ) from e
        except json.JSONDecodeError as e:
            raise LLMGenerationError(
                "Invalid JSON response from Ollama",
                details={"model": model, "parse_error": str(e)},
            ) from e

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using Ollama API.

        POST /api/generate with payload:
        {
            "model": "qwen2.5:7b",
            "prompt": "...",
            "system": "...",
            "stream": false,
            "format": <JSON Schema or "json">,
            "images": ["<base64>", ...],
            "options": {"temperature": 0.0, "num_predict": 256}
        }

        Errors flagged ``retryable`` are repeated up to max_retries attempts
        in total; anything else is raised on the first occurrence.
        """
        start_time = time.time()
        payload = self._build_payload(request)

        logger.debug(
            "Sending generation request to Ollama",
            model=request.model,
            prompt_length=len(request.prompt),
            vision=request.is_vision,
            has_schema=bool(request.format_schema)
        )

        attempt = 0
        while True:
            attempt += 1
            try:
                response_data = await self._post_generate(payload)
            except LLMClientError as e:
                logger.warning(
                    "Ollama request failed",
                    model=request.model,
                    attempt=attempt,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                if not e.retryable or attempt >= self.max_retries:
                    llm_latency_seconds.labels(model=request.model, success="false").observe(
                        time.time() - start_time
                    )
                    raise
                await self._backoff(attempt, type(e).__name__)
                continue
            return self._parse_response(request, response_data, start_time)


    def _parse_response(
        self, request: LLMGenerationRequest, response_data: Dict[str, Any], start_time: float
    ) -> LLMGenerationResponse:
        latency_ms = int((time.time() - start_time) * 1000)

        content = response_data.get("response", "")
        if not content:
            llm_latency_seconds.labels(model=request.model, success="false").observe(latency_ms / 1000.0)
            raise LLMGenerationError(
                "Empty response from Ollama",
                details={"done_reason": response_data.get("done_reason")}
            )

        model_version = response_data.get("model", request.model)
        prompt_tokens = response_data.get("prompt_eval_count")
        completion_tokens = response_data.get("eval_count")

        logger.debug(
            "Ollama generation successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )

        llm_latency_seconds.labels(model=model_version, success="true").observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(model=model_version, token_type="prompt").inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(model=model_version, token_type="completion").inc(completion_tokens)

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason="stop" if response_data.get("done") else "incomplete",
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            created_at=response_data.get("created_at"),
        )

    async def health_check(self) -> bool:
        """Check Ollama server health via GET /api/tags."""
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=5.0)
            response.raise_for_status()
            logger.debug("Ollama health check passed")
            return True
        except Exception as e:
            logger.warning("Ollama health check failed", error=str(e))
            return False

    async def list_models(self) -> list[str]:
        """
        List all available models via GET /api/tags.

        Returns:
            List of model names (e.g., ["qwen2.5:7b", "llava:7b"])
        """
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=10.0)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, json.JSONDecodeError) as e:
            logger.error("Failed to list models", error=str(e))
            raise LLMConnectionError(
                f"Failed to list models: {str(e)}",
                details={"error": str(e)}
            ) from e

        models = [m["name"] for m in data.get("models", [])]
        logger.debug("Listed available models", count=len(models), models=models)
        return models

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Ollama client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
