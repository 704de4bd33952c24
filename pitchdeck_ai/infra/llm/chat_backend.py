"""
Chat-completion backends reached through LangChain's ChatOpenAI client.

OpenAI and Groq both speak the OpenAI chat-completions protocol; Groq is the
same client pointed at a different base URL.
"""

from typing import Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from pitchdeck_ai.application.prompts import SYSTEM_PROMPT
from pitchdeck_ai.application.services.backend_order import (
    GROQ_BACKEND,
    OPENAI_BACKEND,
)
from pitchdeck_ai.domain.entities import GenerationOptions
from pitchdeck_ai.domain.exceptions import (
    InvalidResponseError,
    ProviderNotConfiguredError,
)
from pitchdeck_ai.domain.value_objects import ErrorKind, ProviderStatus
from pitchdeck_ai.infra.config.settings import is_placeholder_key
from pitchdeck_ai.infra.llm.base_backend import (
    BaseGenerationBackend,
    Completion,
    SamplingDefaults,
)

_STATUS_PROBE = SamplingDefaults(max_tokens=1, temperature=0.0)


class ChatCompletionBackend(BaseGenerationBackend):
    """Backend driven by an OpenAI-compatible chat-completions endpoint."""

    #: Public model identifiers accepted by this backend, mapped to native names.
    model_aliases: Dict[str, str] = {}
    #: Whether a caller-supplied ``options.user_api_key`` may be sent upstream.
    accepts_user_api_key = False

    def __init__(
        self,
        api_key: Optional[str],
        enabled: bool = True,
        base_url: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.enabled = enabled
        self.base_url = base_url

    def configuration_warnings(self) -> List[str]:
        warnings = []
        if not self.enabled:
            warnings.append(f"{self.name} is disabled in configuration")
        if is_placeholder_key(self.api_key):
            warnings.append(f"{self.name} API key is missing or a placeholder")
        return warnings

    def api_key_for(self, options: GenerationOptions) -> Optional[str]:
        """Key sent upstream; a caller key only ever reaches the backend it was issued for."""
        if self.accepts_user_api_key and options.user_api_key:
            return options.user_api_key
        return self.api_key

    def ensure_configured(self, options: GenerationOptions) -> None:
        if not self.enabled:
            raise ProviderNotConfiguredError(self.name, "disabled in configuration")
        if is_placeholder_key(self.api_key_for(options)):
            raise ProviderNotConfiguredError(self.name, "missing API key")

    def resolve_model(self, requested: Optional[str]) -> str:
        if requested and requested in self.model_aliases:
            return self.model_aliases[requested]
        return self.default_model

    def _build_llm(
        self, model: str, api_key: str, sampling: SamplingDefaults, timeout: float
    ) -> ChatOpenAI:
        llm_kwargs = {
            "model": model,
            "api_key": api_key,
            "temperature": sampling.temperature,
            "max_tokens": sampling.max_tokens,
            "timeout": timeout,
            # Retries are owned by the fallback-model rule and the orchestrator
            "max_retries": 0,
        }

        # Add base_url if provided (for OpenAI-compatible servers)
        if self.base_url:
            llm_kwargs["base_url"] = self.base_url

        return ChatOpenAI(**llm_kwargs)

    async def _complete(
        self,
        prompt: str,
        model: str,
        options: GenerationOptions,
        sampling: SamplingDefaults,
        timeout: float,
    ) -> Completion:
        llm = self._build_llm(model, self.api_key_for(options), sampling, timeout)
        messages = [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)]
        result = await llm.agenerate([messages])
        self._log.info("llm.invoke.text", model=model)

        if not result.generations or not result.generations[0]:
            raise InvalidResponseError(self.name)

        usage = (result.llm_output or {}).get("token_usage") or {}
        return Completion(
            text=result.generations[0][0].text or "",
            tokens_used=usage.get("total_tokens") or 0,
        )

    async def get_status(self) -> ProviderStatus:
        """Cheapest possible call: one token from the fallback model."""
        if not self.enabled or is_placeholder_key(self.api_key):
            return ProviderStatus.UNAVAILABLE

        llm = self._build_llm(
            self.fallback_model, self.api_key, _STATUS_PROBE, self.status_timeout
        )
        try:
            await llm.agenerate([[HumanMessage(content="test")]])
        except Exception as e:
            classified = self.classifier.classify(e, self.name, "status probe")
            self._log.warning(
                "backend.status.failed",
                error_kind=classified.kind.value,
                error=classified.message,
            )
            if classified.kind is ErrorKind.QUOTA_EXCEEDED:
                return ProviderStatus.QUOTA_EXCEEDED
            return ProviderStatus.UNAVAILABLE
        return ProviderStatus.AVAILABLE


class OpenAIBackend(ChatCompletionBackend):
    """Cloud-keyed backend; accepts native ``gpt-*`` ids and per-request keys."""

    name = OPENAI_BACKEND
    accepts_user_api_key = True

    def __init__(self, api_key: Optional[str], **kwargs):
        kwargs.setdefault("default_model", "gpt-4")
        kwargs.setdefault("fallback_model", "gpt-3.5-turbo")
        kwargs.setdefault("confidence_baseline", 0.7)
        super().__init__(api_key, **kwargs)
        self.model_aliases = {
            "openai": self.default_model,
            "gpt-4": "gpt-4",
            "gpt-3.5-turbo": "gpt-3.5-turbo",
        }

    def resolve_model(self, requested: Optional[str]) -> str:
        if requested and requested.startswith("gpt-"):
            return requested
        return super().resolve_model(requested)


class GroqBackend(ChatCompletionBackend):
    """Rate-limited cloud backend behind the ``groq-`` model prefix."""

    name = GROQ_BACKEND
    model_aliases = {
        "groq-llama-70b": "llama3-70b-8192",
        "groq-llama-8b": "llama3-8b-8192",
        "groq-gemma": "gemma-7b-it",
    }

    def __init__(self, api_key: Optional[str], **kwargs):
        kwargs.setdefault("default_model", "llama3-70b-8192")
        kwargs.setdefault("fallback_model", "llama3-8b-8192")
        kwargs.setdefault("confidence_baseline", 0.6)
        kwargs.setdefault("base_url", "https://api.groq.com/openai/v1")
        super().__init__(api_key, **kwargs)

    def model_label(self, model: str) -> str:
        return f"groq:{model}"
