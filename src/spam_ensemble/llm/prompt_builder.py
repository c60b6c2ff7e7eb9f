"""
Prompt builder for classifier requests.

Responsible for:
- Loading and rendering Jinja2 templates (system, text and image prompts)
- Truncating the body at a sentence boundary
- Attaching the JSON Schema that constrains the model to the label set
- Constructing complete LLMGenerationRequest objects
"""

import base64
from pathlib import Path
from typing import Any, Dict, Optional, Sequence
from jinja2 import Environment, FileSystemLoader
import structlog

from spam_ensemble.llm.text_utils import normalize_whitespace, truncate_at_sentence_boundary
from spam_ensemble.models.enums import MailClassification
from spam_ensemble.models.llm_models import LLMGenerationRequest


logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptBuilder:
    """
    Build classifier prompts for text and image signals.

    The label set is rendered into every prompt and into the output schema,
    so the model is asked to choose among exactly the labels the ensemble
    understands.
    """

    def __init__(
        self,
        templates_dir: Path = DEFAULT_TEMPLATES_DIR,
        body_truncation_limit: int = 8000,
        labels: Optional[Sequence[MailClassification]] = None,
        default_temperature: float = 0.0,
        default_max_tokens: int = 256,
    ):
        """
        Initialize prompt builder.

        Args:
            templates_dir: Directory containing prompt templates
            body_truncation_limit: Max characters of text sent to the model
            labels: Label set (default: MailClassification.variants())
            default_temperature: Default temperature
            default_max_tokens: Default max tokens
        """
        self.templates_dir = Path(templates_dir)
        self.body_truncation_limit = body_truncation_limit
        self.labels = [label.value for label in (labels or MailClassification.variants())]
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False  # Prompts, not HTML
        )

        try:
            self.system_template = self.jinja_env.get_template("system_prompt.txt")
            self.text_template = self.jinja_env.get_template("text_prompt.txt")
            self.image_template = self.jinja_env.get_template("image_prompt.txt")
        except Exception as e:
            logger.error("Failed to load prompt templates", error=str(e), templates_dir=str(self.templates_dir))
            raise

        logger.info(
            "PromptBuilder initialized",
            templates_dir=str(self.templates_dir),
            body_truncation_limit=body_truncation_limit,
            labels=self.labels,
        )

    @property
    def text_schema(self) -> Dict[str, Any]:
        """Schema for a single-label answer."""
        return {
            "type": "object",
            "properties": {"label": {"type": "string", "enum": list(self.labels)}},
            "required": ["label"],
        }

    @property
    def image_schema(self) -> Dict[str, Any]:
        """Schema for a per-label confidence answer."""
        return {
            "type": "object",
            "properties": {
                "confidences": {
                    "type": "object",
                    "properties": {
                        label: {"type": "number", "minimum": 0.0, "maximum": 1.0}
                        for label in self.labels
                    },
                    "required": list(self.labels),
                }
            },
            "required": ["confidences"],
        }

    def build_system_prompt(self) -> str:
        return self.system_template.render(labels=self.labels).strip()

    def build_text_prompt(self, text: str, field: str) -> str:
        """
        Render the text prompt for a subject or body.

        Text longer than body_truncation_limit is cut at a sentence boundary.
        """
        normalized = normalize_whitespace(text)
        truncated = truncate_at_sentence_boundary(normalized, self.body_truncation_limit)
        return self.text_template.render(
            field=field,
            text=truncated,
            labels=self.labels,
            truncated=len(truncated) < len(normalized),
            limit=self.body_truncation_limit,
        ).strip()

    def build_image_prompt(self) -> str:
        return self.image_template.render(labels=self.labels).strip()

    def build_text_request(
        self,
        text: str,
        field: str,
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMGenerationRequest:
        return LLMGenerationRequest(
            prompt=self.build_text_prompt(text, field),
            system=self.build_system_prompt(),
            model=model,
            temperature=self.default_temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.default_max_tokens,
            format_schema=self.text_schema,
        )

    def build_image_request(
        self,
        data: bytes,
        model: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMGenerationRequest:
        return LLMGenerationRequest(
            prompt=self.build_image_prompt(),
            system=self.build_system_prompt(),
            model=model,
            temperature=self.default_temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.default_max_tokens,
            format_schema=self.image_schema,
            images=[base64.b64encode(data).decode("ascii")],
        )
