"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM clients
- OllamaClient: Implementation for Ollama inference server
- PromptBuilder: Renders classifier prompts and output schemas
- text_utils: Text processing utilities (truncation, whitespace)
- exceptions: LLM-specific exceptions
"""

from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.ollama_client import OllamaClient
from spam_ensemble.llm.prompt_builder import PromptBuilder
from spam_ensemble.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMServerError,
    LLMTimeoutError,
)

__all__ = [
    "BaseLLMClient",
    "OllamaClient",
    "PromptBuilder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMModelNotAvailableError",
    "LLMServerError",
    "LLMTimeoutError",
]
