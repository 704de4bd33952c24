"""
Backend ordering policy.

The order depends only on the requested model identifier, never on backend
health: health is discovered by attempting.
"""

from typing import List, Optional

OPENAI_BACKEND = "openai"
GROQ_BACKEND = "groq"
LOCAL_BACKEND = "local"

GROQ_MODEL_PREFIX = "groq-"
LOCAL_MODEL_IDS = frozenset({"llama3.1-8b", "llama3.1-instruct", "llama3.1-70b"})

DEFAULT_FALLBACK_ORDER = (GROQ_BACKEND, OPENAI_BACKEND, LOCAL_BACKEND)


def is_local_model(model: Optional[str]) -> bool:
    return model == LOCAL_BACKEND or model in LOCAL_MODEL_IDS


def order_backends(model: Optional[str] = None) -> List[str]:
    """
    Ordered backend names to attempt for a requested model identifier.

    >>> order_backends("llama3.1-8b")
    ['local', 'groq', 'openai']
    >>> order_backends("groq-llama-8b")
    ['groq', 'openai', 'local']
    """
    if is_local_model(model):
        return [LOCAL_BACKEND, GROQ_BACKEND, OPENAI_BACKEND]
    if model and model.startswith(GROQ_MODEL_PREFIX):
        return [GROQ_BACKEND, OPENAI_BACKEND, LOCAL_BACKEND]
    return list(DEFAULT_FALLBACK_ORDER)
