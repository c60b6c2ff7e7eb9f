"""
Ensemble spam classifier for email.

Combines independent per-signal predictions into one confidence vector:
- Body text (LLM text classifier, weight 0.5)
- Subject text (LLM text classifier, weight 0.3)
- Attachment images (vision classifier per image, uniformly merged, weight 0.2)

Architecture: async fan-out orchestrator + linear merge engine + FastAPI surface
"""

__version__ = "0.1.0"
