"""
Static provider catalog and backend construction from settings.
"""

from typing import Dict, Tuple

from pitchdeck_ai.application.ports import GenerationBackendPort
from pitchdeck_ai.application.services.backend_order import (
    GROQ_BACKEND,
    LOCAL_BACKEND,
    OPENAI_BACKEND,
)
from pitchdeck_ai.domain.entities import ProviderDescriptor
from pitchdeck_ai.domain.value_objects import CostTier
from pitchdeck_ai.infra.config.settings import Settings
from pitchdeck_ai.infra.llm.chat_backend import GroqBackend, OpenAIBackend
from pitchdeck_ai.infra.llm.ollama_backend import LOCAL_MODEL_NAMES, OllamaBackend

PROVIDER_CATALOG: Tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        name="openai",
        display_name="OpenAI GPT-4",
        supported_models=("gpt-4", "gpt-3.5-turbo"),
        cost_tier=CostTier.PAID,
        is_local=False,
        backend=OPENAI_BACKEND,
    ),
    ProviderDescriptor(
        name="groq-llama-8b",
        display_name="Groq Llama 3 (8B)",
        supported_models=(GroqBackend.model_aliases["groq-llama-8b"],),
        cost_tier=CostTier.PAID,
        is_local=False,
        backend=GROQ_BACKEND,
    ),
    ProviderDescriptor(
        name="groq-llama-70b",
        display_name="Groq Llama 3 (70B)",
        supported_models=(GroqBackend.model_aliases["groq-llama-70b"],),
        cost_tier=CostTier.PAID,
        is_local=False,
        backend=GROQ_BACKEND,
    ),
    ProviderDescriptor(
        name="groq-gemma",
        display_name="Groq Gemma 7B",
        supported_models=(GroqBackend.model_aliases["groq-gemma"],),
        cost_tier=CostTier.PAID,
        is_local=False,
        backend=GROQ_BACKEND,
    ),
    ProviderDescriptor(
        name="llama3.1-8b",
        display_name="Llama 3.1 (8B)",
        supported_models=(LOCAL_MODEL_NAMES["llama3.1-8b"],),
        cost_tier=CostTier.FREE,
        is_local=True,
        backend=LOCAL_BACKEND,
    ),
    ProviderDescriptor(
        name="llama3.1-instruct",
        display_name="Llama 3.1 Instruct",
        supported_models=(LOCAL_MODEL_NAMES["llama3.1-instruct"],),
        cost_tier=CostTier.FREE,
        is_local=True,
        backend=LOCAL_BACKEND,
    ),
    ProviderDescriptor(
        name="llama3.1-70b",
        display_name="Llama 3.1 (70B)",
        supported_models=(LOCAL_MODEL_NAMES["llama3.1-70b"],),
        cost_tier=CostTier.FREE,
        is_local=True,
        backend=LOCAL_BACKEND,
    ),
)


def build_backends(settings: Settings) -> Dict[str, GenerationBackendPort]:
    """One adapter per backend name, configured from the environment."""
    shared = {
        "generation_timeout": settings.ai_generation_timeout,
        "chat_timeout": settings.ai_chat_timeout,
        "status_timeout": settings.ai_status_timeout,
        "retry_backoff": settings.ai_retry_backoff,
    }
    return {
        OPENAI_BACKEND: OpenAIBackend(
            settings.openai_api_key,
            enabled=settings.openai_enabled,
            base_url=settings.openai_base_url,
            default_model=settings.openai_default_model,
            fallback_model=settings.openai_fallback_model,
            confidence_baseline=settings.confidence_baseline_openai,
            **shared,
        ),
        GROQ_BACKEND: GroqBackend(
            settings.groq_api_key,
            enabled=settings.groq_enabled,
            base_url=settings.groq_base_url,
            default_model=settings.groq_default_model,
            fallback_model=settings.groq_fallback_model,
            confidence_baseline=settings.confidence_baseline_groq,
            **shared,
        ),
        LOCAL_BACKEND: OllamaBackend(
            settings.ollama_base_url,
            enabled=settings.ollama_enabled,
            default_model=settings.ollama_default_model,
            fallback_model=settings.ollama_fallback_model,
            confidence_baseline=settings.confidence_baseline_ollama,
            **shared,
        ),
    }
