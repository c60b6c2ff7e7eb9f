"""
Configuration settings for the spam ensemble.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

import math

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Spam Ensemble"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Ollama Configuration ===
    OLLAMA_BASE_URL: str = "http://ollama:11434"
    OLLAMA_TIMEOUT: int = 60  # seconds
    OLLAMA_MAX_RETRIES: int = 2  # Connection-level retries only

    # === Signal Models ===
    BODY_MODEL: str = "qwen2.5:7b"
    SUBJECT_MODEL: str = "qwen2.5:7b"
    ATTACHMENT_MODEL: str = "llava:7b"  # Must be vision-capable
    LLM_TEMPERATURE: float = 0.0
    LLM_MAX_TOKENS: int = 256

    # === Input Processing ===
    BODY_TRUNCATION_LIMIT: int = 8000  # chars

    # === Ensemble Weights (body, subject, attachments) ===
    BODY_WEIGHT: float = 0.5
    SUBJECT_WEIGHT: float = 0.3
    ATTACHMENT_WEIGHT: float = 0.2

    # === Attachments ===
    MAX_IMAGES_PER_MAIL: int = 16
    MAX_CONCURRENT_IMAGE_PREDICTIONS: int = 4
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024
    CLASSIFIABLE_IMAGE_TYPES: list[str] = [
        "image/png",
        "image/jpeg",
        "image/gif",
        "image/webp",
    ]

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @model_validator(mode="after")
    def _check_signal_weights(self) -> "Settings":
        weights = (self.BODY_WEIGHT, self.SUBJECT_WEIGHT, self.ATTACHMENT_WEIGHT)
        if any(w < 0.0 or w > 1.0 for w in weights):
            raise ValueError(f"Signal weights must lie in [0, 1], got {weights}")
        if not math.isclose(sum(weights), 1.0, abs_tol=1e-9):
            raise ValueError(f"Signal weights must sum to 1.0, got {sum(weights)}")
        if self.MAX_CONCURRENT_IMAGE_PREDICTIONS < 1:
            raise ValueError("MAX_CONCURRENT_IMAGE_PREDICTIONS must be at least 1")
        return self


# Global settings instance
settings = Settings()
