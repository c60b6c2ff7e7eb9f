"""Custom Prometheus metrics for the spam ensemble.

These metrics are exposed at /metrics and should be scraped by Prometheus.
Alert rules should be configured for:
- signal_failures_total (a signal that keeps degrading to empty weakens the ensemble)
- predictions_total{label="none"} (mails with no basis for a decision)
"""

from prometheus_client import Counter, Histogram

# === Signal Metrics ===

signal_failures_total = Counter(
    "signal_failures_total",
    "Signals that degraded to the empty prediction, by signal and reason",
    ["signal", "reason"],
)
"""
Fail-open counter.

Labels:
- signal: body, subject, attachment_image, attachments
- reason: absent, classifier_error, unknown_label, empty_result, source_error

Alert thresholds:
- WARN: classifier_error rate > 5% of predictions for a signal
- CRITICAL: unknown_label > 0 (classifier and label set out of sync)
"""

signal_latency_seconds = Histogram(
    "signal_latency_seconds",
    "Time to resolve one signal, failures included",
    ["signal"],
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

images_classified_total = Counter(
    "images_classified_total",
    "Attachment images dispatched to the image classifier",
)

# === Ensemble Metrics ===

predictions_total = Counter(
    "predictions_total",
    "Final ensemble decisions by label ('none' when undecided)",
    ["label"],
)

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "LLM generation latency in seconds",
    ["model", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)
"""
LLM generation latency histogram.

Labels:
- model: Model name (e.g., qwen2.5:7b, llava:7b)
- success: true (generation succeeded), false (generation failed)
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
