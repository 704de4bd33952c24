"""
Application services for generation orchestration and response handling.
"""

from .backend_order import DEFAULT_FALLBACK_ORDER, order_backends
from .confidence import ConfidenceScorer, ConfidenceWeights
from .error_classifier import ErrorClassifier
from .generation_orchestrator import AttemptResult, GenerationOrchestrator
from .response_parser import ResponseParser

__all__ = [
    "DEFAULT_FALLBACK_ORDER",
    "order_backends",
    "ConfidenceScorer",
    "ConfidenceWeights",
    "ErrorClassifier",
    "AttemptResult",
    "GenerationOrchestrator",
    "ResponseParser",
]
