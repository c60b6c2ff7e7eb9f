"""Structured logging setup (structlog over the stdlib logging module).

Production renders one JSON object per line; anything else gets the
coloured console renderer. Mail content never reaches the log: fields that
may carry subject or body text are reduced to their length.
"""

import logging
import sys
from enum import Enum

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "spam-ensemble"

# Event keys whose values may hold message text
MAIL_CONTENT_KEYS = frozenset({"subject", "body", "text", "prompt"})

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "multipart")


def add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", SERVICE_NAME)
    return event_dict


def redact_mail_content(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace message text with its length."""
    for key in MAIL_CONTENT_KEYS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = f"<{len(value)} chars>"
    return event_dict


def render_enums(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Log labels and signal names by identifier rather than by repr."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and route stdlib records through the same renderer.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        environment: "production" selects JSON output
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    json_output = environment.lower() == "production"

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_name,
        render_enums,
        redact_mail_content,
    ]
    if json_output:
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=logging.getLevelName(level),
        renderer="json" if json_output else "console",
    )
