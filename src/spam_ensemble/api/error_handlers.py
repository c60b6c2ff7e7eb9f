"""
Exception handlers turning domain errors into JSON error bodies.

Classifier and LLM failures never get here: the adapters absorb them and
the request still answers 200. What remains is bad input (400) and a broken
deployment (500).
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from spam_ensemble.ensemble.exceptions import EnsembleError
from spam_ensemble.models.exceptions import MailParseError

logger = structlog.get_logger(__name__)


def error_body(error: str, message: str, details: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    body: dict[str, Any] = {
        "error": error,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        body["details"] = details
    return body


async def mail_parse_error_handler(request: Request, exc: MailParseError) -> JSONResponse:
    """Undecodable raw message: 400, the caller sent something that is not a mail."""
    logger.warning("Rejected raw message", error=exc.message, details=exc.details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("invalid_message", exc.message, exc.details),
    )


async def ensemble_error_handler(request: Request, exc: EnsembleError) -> JSONResponse:
    """
    Misconfigured ensemble (weights not summing to 1, length mismatch).

    Answers 500 without details: the weights are deployment configuration,
    not something the caller can fix.
    """
    logger.error(
        "Ensemble misconfigured",
        error_type=type(exc).__name__,
        error=exc.message,
        details=exc.details,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("ensemble_misconfigured", exc.message),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("internal_error", "An unexpected error occurred"),
    )


# Registered in order by main.py via app.add_exception_handler()
EXCEPTION_HANDLERS = {
    MailParseError: mail_parse_error_handler,
    EnsembleError: ensemble_error_handler,
    Exception: unhandled_error_handler,
}
