"""
Request and response of one call to the inference server.

Built by PromptBuilder, sent by a BaseLLMClient, read by the LLM-backed
classifiers. Nothing in the ensemble depends on these.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class LLMGenerationRequest(BaseModel):
    """A prompt plus decoding options; images make it a vision request."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(..., description="Model tag on the server, e.g. 'llava:7b'")
    prompt: str = Field(..., description="Rendered user prompt")
    system: Optional[str] = Field(default=None, description="Rendered system prompt")
    format_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema the completion must satisfy; plain JSON mode when omitted"
    )
    images: Optional[list[str]] = Field(
        default=None,
        description="Base64 image payloads (vision models only)"
    )
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=256, ge=1, le=8192, description="Completion token cap")
    seed: Optional[int] = Field(default=None, description="Fixed sampling seed")

    @property
    def is_vision(self) -> bool:
        return bool(self.images)


class LLMGenerationResponse(BaseModel):
    """Generated text with the usage figures the server reported."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Completion text, JSON for the classifiers")
    model_version: str = Field(..., description="Model that actually answered")
    finish_reason: str = Field(..., description="'stop' when generation ended normally")
    latency_ms: int = Field(..., ge=0)
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    created_at: Optional[str] = Field(default=None, description="Server timestamp (ISO 8601)")
