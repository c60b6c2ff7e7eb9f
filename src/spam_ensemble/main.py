"""
FastAPI application entry point for the spam ensemble.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from spam_ensemble.api.dependencies import get_llm_client
from spam_ensemble.api.error_handlers import EXCEPTION_HANDLERS
from spam_ensemble.api.middleware import RequestTracingMiddleware
from spam_ensemble.api.routes import router
from spam_ensemble.config import settings
from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.llm.exceptions import LLMClientError
from spam_ensemble.logging_config import configure_logging

# Configure structured logging before the app starts emitting events
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)


async def report_missing_models(client: BaseLLMClient) -> None:
    """Warn about signal models the inference server cannot run.

    The service starts regardless: a missing model only turns its signal
    into the empty prediction.
    """
    required = [settings.BODY_MODEL, settings.SUBJECT_MODEL, settings.ATTACHMENT_MODEL]
    try:
        missing = await client.missing_models(required)
    except LLMClientError as e:
        logger.warning("Inference server unreachable at startup", error=e.message)
        return
    if missing:
        logger.warning("Signal models not available on inference server", missing=missing)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup and close the shared LLM client on shutdown."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        ollama_base_url=settings.OLLAMA_BASE_URL,
        models={
            "body": settings.BODY_MODEL,
            "subject": settings.SUBJECT_MODEL,
            "attachments": settings.ATTACHMENT_MODEL,
        },
        weights=[settings.BODY_WEIGHT, settings.SUBJECT_WEIGHT, settings.ATTACHMENT_WEIGHT],
    )
    client = get_llm_client()
    await report_missing_models(client)
    yield
    await client.close()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    description="Ensemble spam classification over body, subject and attachment signals",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Request tracing middleware (request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router)

if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "predict": "/predict",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "spam_ensemble.main:app",
        host="0.0.0.0",
        port=8000,
    )
