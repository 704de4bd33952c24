"""
Shared adapter behaviour for every generation backend.

Subclasses only supply transport (``_complete``), model-identifier mapping and
configuration checks. Prompt building, the single fallback-model retry,
response parsing and confidence scoring live here so all three backends
behave identically.
"""

import asyncio
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from pitchdeck_ai.application.ports import GenerationBackendPort
from pitchdeck_ai.application.prompts import PitchDeckPrompts
from pitchdeck_ai.application.services.confidence import ConfidenceScorer
from pitchdeck_ai.application.services.error_classifier import ErrorClassifier
from pitchdeck_ai.application.services.response_parser import ResponseParser
from pitchdeck_ai.domain.entities import (
    GeneratedChat,
    GeneratedDeck,
    GeneratedSlide,
    GenerationOptions,
    SlideContext,
)
from pitchdeck_ai.domain.exceptions import (
    EmptyResponseError,
    GenerationCancelledError,
    ProviderNotConfiguredError,
    ResponseParseError,
)
from pitchdeck_ai.domain.value_objects import SlideType
from pitchdeck_ai.infra.config.logging_config import get_logger

T = TypeVar("T")


@dataclass(frozen=True)
class Completion:
    text: str
    tokens_used: int = 0


@dataclass(frozen=True)
class SamplingDefaults:
    max_tokens: int
    temperature: float


SLIDE_DEFAULTS = SamplingDefaults(max_tokens=1200, temperature=0.7)
DECK_DEFAULTS = SamplingDefaults(max_tokens=8000, temperature=0.7)
CHAT_DEFAULTS = SamplingDefaults(max_tokens=800, temperature=0.8)


class BaseGenerationBackend(GenerationBackendPort):
    """Template for a backend adapter; see subclasses for transport details."""

    #: Segment numbered headings when a deck response has no SLIDE markers.
    heuristic_deck_fallback = False

    def __init__(
        self,
        default_model: str,
        fallback_model: str,
        confidence_baseline: float,
        generation_timeout: float = 60.0,
        chat_timeout: float = 30.0,
        status_timeout: float = 5.0,
        retry_backoff: bool = True,
        parser: Optional[ResponseParser] = None,
        scorer: Optional[ConfidenceScorer] = None,
        classifier: Optional[ErrorClassifier] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.default_model = default_model
        self.fallback_model = fallback_model
        self.confidence_baseline = confidence_baseline
        self.generation_timeout = generation_timeout
        self.chat_timeout = chat_timeout
        self.status_timeout = status_timeout
        self.retry_backoff = retry_backoff
        self.parser = parser or ResponseParser()
        self.scorer = scorer or ConfidenceScorer()
        self.classifier = classifier or ErrorClassifier()
        self._sleep = sleep
        self._log = get_logger(f"infra.llm.{self.name}")

    # ---------- variant hooks ----------
    @abstractmethod
    def resolve_model(self, requested: Optional[str]) -> str:
        """Map a public model identifier onto this backend's native name."""
        pass

    @abstractmethod
    def ensure_configured(self, options: GenerationOptions) -> None:
        """Raise ProviderNotConfiguredError when this backend cannot run."""
        pass

    @abstractmethod
    async def _complete(
        self,
        prompt: str,
        model: str,
        options: GenerationOptions,
        sampling: SamplingDefaults,
        timeout: float,
    ) -> Completion:
        """Send one prompt upstream with resolved sampling; return its raw text."""
        pass

    def model_label(self, model: str) -> str:
        """Model identifier as reported in results."""
        return model

    # ---------- capability set ----------
    async def generate_slide_content(
        self,
        slide_type: SlideType,
        context: SlideContext,
        options: GenerationOptions,
    ) -> GeneratedSlide:
        self.ensure_configured(options)
        prompt = PitchDeckPrompts.build_slide_prompt(slide_type, context)

        async def produce(model: str, opts: GenerationOptions) -> GeneratedSlide:
            self._log.info("backend.slide.start", slide_type=str(slide_type), model=model)
            completion = await self._generate_text(
                prompt, model, opts, SLIDE_DEFAULTS, self.generation_timeout
            )
            parsed = self.parser.parse_single(completion.text, slide_type, self.name)
            return GeneratedSlide(
                title=parsed.title,
                content=parsed.content,
                speaker_notes=parsed.speaker_notes,
                model=self.model_label(model),
                tokens_used=completion.tokens_used,
                confidence=self.scorer.score(completion.text, self.confidence_baseline),
            )

        return await self._with_fallback_model("slide generation", options, produce)

    async def generate_freeform_deck(
        self,
        prompt: str,
        options: GenerationOptions,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> GeneratedDeck:
        self.ensure_configured(options)
        full_prompt = PitchDeckPrompts.build_freeform_prompt(prompt, preferences)

        async def produce(model: str, opts: GenerationOptions) -> GeneratedDeck:
            self._log.info("backend.deck.start", model=model, prompt_length=len(full_prompt))
            completion = await self._generate_text(
                full_prompt, model, opts, DECK_DEFAULTS, self.generation_timeout
            )
            slides = self.parser.parse_deck(
                completion.text, heuristic_fallback=self.heuristic_deck_fallback
            )
            if not slides:
                raise ResponseParseError("no deck slides found", self.name)
            self._log.info("backend.deck.parsed", slide_count=len(slides))
            return GeneratedDeck(
                slides=slides,
                model=self.model_label(model),
                tokens_used=completion.tokens_used,
                confidence=self.scorer.score(completion.text, self.confidence_baseline),
            )

        return await self._with_fallback_model("freeform deck generation", options, produce)

    async def generate_chat_response(
        self,
        message: str,
        deck_context: Optional[Dict[str, Any]],
        slide_context: Optional[Dict[str, Any]],
        options: GenerationOptions,
    ) -> GeneratedChat:
        self.ensure_configured(options)
        prompt = PitchDeckPrompts.build_chat_prompt(message, deck_context, slide_context)

        async def produce(model: str, opts: GenerationOptions) -> GeneratedChat:
            completion = await self._generate_text(
                prompt, model, opts, CHAT_DEFAULTS, self.chat_timeout
            )
            return GeneratedChat(
                text=completion.text.strip(),
                model=self.model_label(model),
                tokens_used=completion.tokens_used,
            )

        return await self._with_fallback_model("chat response", options, produce)

    # ---------- shared machinery ----------
    async def _generate_text(
        self,
        prompt: str,
        model: str,
        options: GenerationOptions,
        sampling: SamplingDefaults,
        timeout: float,
    ) -> Completion:
        resolved = self.sampling_for(options, sampling)
        completion = await self._complete(prompt, model, options, resolved, timeout)
        if not completion.text or not completion.text.strip():
            raise EmptyResponseError(self.name)
        return completion

    async def _with_fallback_model(
        self,
        operation: str,
        options: GenerationOptions,
        produce: Callable[[str, GenerationOptions], Awaitable[T]],
    ) -> T:
        """
        Run ``produce`` once, retrying exactly once on the fallback model.

        The retry only happens when the first attempt used the default model
        and the request has not been retried yet, so a backend is invoked at
        most twice per request.
        """
        model = self.resolve_model(options.model)
        try:
            return await produce(model, options)
        except (GenerationCancelledError, ProviderNotConfiguredError):
            raise
        except Exception as e:
            if model != self.default_model or options.retry_count >= 1:
                raise
            classified = self.classifier.classify(e, self.name, operation)
            self._log.warning(
                "backend.retry.fallback_model",
                operation=operation,
                failed_model=model,
                fallback_model=self.fallback_model,
                error_kind=classified.kind.value,
                error=classified.message,
            )
            if self.retry_backoff and self.classifier.should_retry(
                classified, options.retry_count
            ):
                await self._sleep(self.classifier.backoff_delay(options.retry_count))
            return await produce(self.fallback_model, options.for_retry())

    @staticmethod
    def sampling_for(
        options: GenerationOptions, defaults: SamplingDefaults
    ) -> SamplingDefaults:
        return SamplingDefaults(
            max_tokens=options.max_tokens or defaults.max_tokens,
            temperature=(
                options.temperature
                if options.temperature is not None
                else defaults.temperature
            ),
        )
