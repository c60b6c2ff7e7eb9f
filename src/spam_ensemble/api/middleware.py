"""Request ID propagation for structured logs."""

import re
import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied IDs end up in log lines; anything else is replaced
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _REQUEST_ID_RE.fullmatch(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind request_id (plus method and path) for the lifetime of a request.

    Signal tasks spawned by the ensemble copy the context when created, so
    fail-open warnings from the adapters carry the same request_id. The ID
    is returned in the X-Request-ID response header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        start = time.perf_counter()

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            logger.debug("Request started", content_length=request.headers.get("content-length"))
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "Request failed",
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise

            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
