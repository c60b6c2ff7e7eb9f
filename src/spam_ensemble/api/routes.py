"""
API routes for ensemble spam prediction.

- POST /predict: JSON mail (subject, body, base64 attachments)
- POST /predict/raw: raw RFC 5322 message
- GET /health: inference server reachability
- GET /labels: the closed label set
"""

import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from spam_ensemble.api.dependencies import get_ensemble, get_llm_client, get_settings
from spam_ensemble.api.models import HealthResponse, LabelsResponse, PredictRequest, PredictResponse
from spam_ensemble.config import Settings
from spam_ensemble.ensemble.orchestrator import AntiSpamEnsemble
from spam_ensemble.llm.base_client import BaseLLMClient
from spam_ensemble.models.enums import MailClassification
from spam_ensemble.models.input_models import MailContent

logger = structlog.get_logger(__name__)

predict_requests_total = Counter(
    "predict_requests_total",
    "Total prediction requests",
    ["endpoint", "status"]
)

predict_duration_seconds = Histogram(
    "predict_duration_seconds",
    "Prediction request duration in seconds",
    ["endpoint"]
)

router = APIRouter()


async def _run_prediction(
    endpoint: str, mail: MailContent, ensemble: AntiSpamEnsemble
) -> PredictResponse:
    start_time = time.time()
    logger.info(
        "Prediction request received",
        endpoint=endpoint,
        has_subject=mail.subject is not None,
        has_body=mail.body is not None,
        attachments=len(mail.attachments),
    )
    try:
        result = await ensemble.evaluate(mail)
    except Exception:
        predict_requests_total.labels(endpoint=endpoint, status="error").inc()
        raise

    predict_requests_total.labels(endpoint=endpoint, status="success").inc()
    predict_duration_seconds.labels(endpoint=endpoint).observe(time.time() - start_time)
    return PredictResponse.from_result(result)


@router.post(
    "/predict",
    response_model=PredictResponse,
    status_code=status.HTTP_200_OK,
    summary="Predict mail classification",
    responses={
        200: {"description": "Prediction computed (label may be null)"},
        422: {"description": "Invalid request format"},
        500: {"description": "Ensemble misconfigured"},
    },
)
async def predict(
    request: PredictRequest,
    ensemble: AntiSpamEnsemble = Depends(get_ensemble),
    settings: Settings = Depends(get_settings),
) -> PredictResponse:
    """
    Classify a mail given as JSON.

    Signals that fail or are absent contribute nothing; the response is
    produced even when every signal is empty.
    """
    mail = request.to_mail_content(settings.CLASSIFIABLE_IMAGE_TYPES)
    return await _run_prediction("predict", mail, ensemble)


@router.post(
    "/predict/raw",
    response_model=PredictResponse,
    status_code=status.HTTP_200_OK,
    summary="Predict classification of a raw RFC 5322 message",
    responses={
        200: {"description": "Prediction computed (label may be null)"},
        400: {"description": "Message could not be parsed"},
    },
)
async def predict_raw(
    http_request: Request,
    ensemble: AntiSpamEnsemble = Depends(get_ensemble),
    settings: Settings = Depends(get_settings),
) -> PredictResponse:
    """Parse the request body as an email and classify it."""
    raw = await http_request.body()
    mail = MailContent.from_bytes(raw, image_types=settings.CLASSIFIABLE_IMAGE_TYPES)
    return await _run_prediction("predict_raw", mail, ensemble)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={
        200: {"description": "Inference server reachable"},
        503: {"description": "Inference server unreachable"},
    },
)
async def health_check(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    """
    Check the inference server.

    Predictions still succeed while it is down (every signal degrades to
    empty), so "unhealthy" means predictions carry no information.
    """
    ollama_ok = await llm_client.health_check()
    services = {"ollama": "ok" if ollama_ok else "unreachable"}
    health_status = "healthy" if ollama_ok else "unhealthy"

    logger.info("Health check", status=health_status, services=services)

    response = HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if ollama_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )


@router.get("/labels", response_model=LabelsResponse, summary="List classification labels")
async def list_labels() -> LabelsResponse:
    return LabelsResponse(labels=[label.value for label in MailClassification.variants()])
