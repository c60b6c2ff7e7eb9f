"""Monitoring and metrics instrumentation for the spam ensemble."""

from spam_ensemble.monitoring.metrics import (
    images_classified_total,
    llm_latency_seconds,
    llm_tokens_total,
    predictions_total,
    signal_failures_total,
    signal_latency_seconds,
)

__all__ = [
    "signal_failures_total",
    "signal_latency_seconds",
    "images_classified_total",
    "predictions_total",
    "llm_latency_seconds",
    "llm_tokens_total",
]
