"""
Local backend served by an Ollama daemon over its HTTP API.
"""

import math
from typing import Any, List, Optional

import httpx

from pitchdeck_ai.application.prompts import SYSTEM_PROMPT
from pitchdeck_ai.application.services.backend_order import LOCAL_BACKEND
from pitchdeck_ai.domain.entities import GenerationOptions
from pitchdeck_ai.domain.exceptions import (
    InvalidResponseError,
    ProviderNotConfiguredError,
)
from pitchdeck_ai.domain.value_objects import ProviderStatus
from pitchdeck_ai.infra.llm.base_backend import (
    BaseGenerationBackend,
    Completion,
    SamplingDefaults,
)

LOCAL_MODEL_NAMES = {
    "llama3.1-8b": "llama3.1:8b",
    "llama3.1-70b": "llama3.1:70b",
    "llama3.1-instruct": "llama3.1:instruct",
}

PULL_TIMEOUT = 300.0
TOP_P = 0.9


def estimate_tokens(text: str) -> int:
    """Rough count, one token per four characters."""
    return math.ceil(len(text) / 4)


class OllamaBackend(BaseGenerationBackend):
    """
    Self-hosted backend. Free and private, but the least reliable formatter,
    so it gets the lowest confidence baseline and the heuristic deck parser.
    """

    name = LOCAL_BACKEND
    heuristic_deck_fallback = True

    def __init__(
        self,
        base_url: Optional[str],
        enabled: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs,
    ):
        kwargs.setdefault("default_model", "llama3.1:8b")
        kwargs.setdefault("fallback_model", "llama3.1:8b")
        kwargs.setdefault("confidence_baseline", 0.4)
        super().__init__(**kwargs)
        self.base_url = (base_url or "").rstrip("/")
        self.enabled = enabled
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=self._transport
        )

    def configuration_warnings(self) -> List[str]:
        warnings = []
        if not self.enabled:
            warnings.append("local backend is disabled in configuration")
        if not self.base_url:
            warnings.append("local backend base URL is not set")
        return warnings

    def ensure_configured(self, options: GenerationOptions) -> None:
        if not self.enabled:
            raise ProviderNotConfiguredError(self.name, "disabled in configuration")
        if not self.base_url:
            raise ProviderNotConfiguredError(self.name, "missing base URL")

    def resolve_model(self, requested: Optional[str]) -> str:
        if not requested:
            return self.default_model
        if requested in LOCAL_MODEL_NAMES:
            return LOCAL_MODEL_NAMES[requested]
        if ":" in requested:
            return requested
        return self.default_model

    def model_label(self, model: str) -> str:
        return f"ollama:{model}"

    @staticmethod
    def wrap_prompt(prompt: str) -> str:
        """The generate endpoint has no system role, so inline the system prompt."""
        return (
            f"{SYSTEM_PROMPT}\n\n{prompt}\n\n"
            "Please provide a detailed, professional response:"
        )

    async def _complete(
        self,
        prompt: str,
        model: str,
        options: GenerationOptions,
        sampling: SamplingDefaults,
        timeout: float,
    ) -> Completion:
        payload = {
            "model": model,
            "prompt": self.wrap_prompt(prompt),
            "stream": False,
            "options": {
                "temperature": sampling.temperature,
                "top_p": TOP_P,
                "num_predict": sampling.max_tokens,
            },
        }
        async with self._client(timeout) as client:
            response = await client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise InvalidResponseError(self.name, "missing response text")

        text = data["response"]
        counted = (data.get("prompt_eval_count") or 0) + (data.get("eval_count") or 0)
        self._log.info("llm.invoke.text", model=model, response_length=len(text))
        return Completion(text=text, tokens_used=counted or estimate_tokens(text))

    async def list_models(self, timeout: Optional[float] = None) -> List[str]:
        """
        Names of the models installed on the daemon.

        Raises:
            InvalidResponseError: If the tags payload is not ``{"models": [...]}``
        """
        async with self._client(timeout or self.status_timeout) as client:
            response = await client.get("/api/tags")
            response.raise_for_status()
            data: Any = response.json()

        if not isinstance(data, dict) or not isinstance(data.get("models") or [], list):
            raise InvalidResponseError(self.name, "malformed model list")
        models = data.get("models") or []
        return [
            m["name"] for m in models if isinstance(m, dict) and isinstance(m.get("name"), str)
        ]

    async def get_status(self) -> ProviderStatus:
        """Available when any supported model is installed on the daemon."""
        if not self.enabled or not self.base_url:
            return ProviderStatus.UNAVAILABLE
        try:
            installed = await self.list_models()
        except Exception as e:
            self._log.warning(
                "backend.status.failed", error_type=type(e).__name__, error=str(e)
            )
            return ProviderStatus.UNAVAILABLE

        supported = set(LOCAL_MODEL_NAMES.values()) | {self.default_model}
        self._log.info("backend.status.models", installed=installed)
        if any(wanted in name for name in installed for wanted in supported):
            return ProviderStatus.AVAILABLE
        return ProviderStatus.UNAVAILABLE

    async def ensure_model_available(self) -> bool:
        """
        Pull the default model if the daemon does not have it.

        Failures are logged and reported as False; a missing local model must
        not stop the service from starting.
        """
        try:
            installed = await self.list_models()
        except (httpx.HTTPError, ValueError, InvalidResponseError) as e:
            self._log.warning("backend.models.unreachable", error=str(e))
            return False

        if self.default_model in installed:
            return True

        self._log.warning("backend.models.missing", model=self.default_model)
        try:
            async with self._client(PULL_TIMEOUT) as client:
                response = await client.post(
                    "/api/pull", json={"name": self.default_model, "stream": False}
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            self._log.error("backend.models.pull_failed", model=self.default_model, error=str(e))
            return False
        self._log.info("backend.models.pulled", model=self.default_model)
        return True
