"""
FastAPI API routes and endpoints.

- routes.py: POST /predict, POST /predict/raw, GET /health, GET /labels
- dependencies.py: Dependency injection for LLM client, prompt builder, ensemble
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request ID tracing
"""

from spam_ensemble.api import dependencies, error_handlers, models
from spam_ensemble.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
