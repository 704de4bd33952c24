"""
Generation Orchestrator - drives the ordered backend fallback.

Every public operation follows the same shape: compute the backend order from
the requested model, then attempt each backend in turn. Each attempt yields an
AttemptResult; the first successful one ends the call, and exhausting the list
yields the generic "All AI providers failed" result. A single backend's
failure is classified and logged here, never raised to the caller.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
)

from pitchdeck_ai.application.cancellation import run_guarded
from pitchdeck_ai.application.ports import GenerationBackendPort
from pitchdeck_ai.application.prompts import PitchDeckPrompts
from pitchdeck_ai.application.services.backend_order import order_backends
from pitchdeck_ai.application.services.error_classifier import ErrorClassifier
from pitchdeck_ai.domain.entities import (
    ContentKind,
    GeneratedChat,
    GeneratedDeck,
    GeneratedSlide,
    GenerationOptions,
    GenerationResult,
    ProviderDescriptor,
    SlideContext,
)
from pitchdeck_ai.domain.exceptions import (
    GenerationCancelledError,
    InvalidResponseError,
)
from pitchdeck_ai.domain.value_objects import (
    ClassifiedError,
    ProviderStatus,
    SlideType,
)
from pitchdeck_ai.infra.config.logging_config import get_logger
from pitchdeck_ai.infra.observability import metrics, trace_operation

BackendCall = Callable[[GenerationBackendPort], Awaitable[Any]]

_OPERATION_LABELS = {
    ContentKind.SLIDE: "slide generation",
    ContentKind.FREEFORM_DECK: "freeform deck generation",
    ContentKind.CHAT: "chat response",
}


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of invoking one backend once (its internal model retry included)."""

    provider: str
    value: Any = None
    error: Optional[ClassifiedError] = None
    skipped: bool = False
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.skipped and self.error is None and self.value is not None


def _shape_error(kind: ContentKind, value: Any) -> Optional[str]:
    """Describe why ``value`` is not a usable result for ``kind``, or None."""
    if kind is ContentKind.SLIDE:
        if not isinstance(value, GeneratedSlide):
            return "expected a slide"
        if not value.title.strip() or not value.content.strip():
            return "slide title or content is empty"
    elif kind is ContentKind.FREEFORM_DECK:
        if not isinstance(value, GeneratedDeck):
            return "expected a deck"
        if not value.slides:
            return "deck contains no slides"
    elif kind is ContentKind.CHAT:
        if not isinstance(value, GeneratedChat):
            return "expected chat text"
        if not value.text.strip():
            return "chat response is empty"
    return None


def _to_result(kind: ContentKind, attempt: AttemptResult) -> GenerationResult:
    value = attempt.value
    if kind is ContentKind.SLIDE:
        return GenerationResult(
            success=True,
            provider=attempt.provider,
            model=value.model,
            content=value,
            tokens_used=value.tokens_used,
            confidence=value.confidence,
        )
    if kind is ContentKind.FREEFORM_DECK:
        return GenerationResult(
            success=True,
            provider=attempt.provider,
            model=value.model,
            content=value.slides,
            tokens_used=value.tokens_used,
            confidence=value.confidence,
        )
    return GenerationResult(
        success=True,
        provider=attempt.provider,
        model=value.model,
        content=value.text,
        tokens_used=value.tokens_used,
    )


class GenerationOrchestrator:
    """
    Top-level generation service.

    Stateless across calls: the only state held is the read-only backend
    registry and catalog, so concurrent calls need no coordination.
    """

    def __init__(
        self,
        backends: Mapping[str, GenerationBackendPort],
        descriptors: Sequence[ProviderDescriptor] = (),
        classifier: Optional[ErrorClassifier] = None,
    ):
        self.backends = dict(backends)
        self.descriptors = tuple(descriptors)
        self.classifier = classifier or ErrorClassifier()
        self._log = get_logger("generation.orchestrator")
        self._validate_configuration()

    def _validate_configuration(self) -> None:
        for name, backend in self.backends.items():
            for warning in backend.configuration_warnings():
                self._log.warning(
                    "backend.config.invalid", provider=name, warning=warning
                )

    # ---------- public operations ----------
    async def generate_slide(
        self,
        slide_type: SlideType,
        context: SlideContext,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult:
        """
        Generate one structured slide through the backend fallback chain.

        Args:
            slide_type: Which of the twelve slide kinds to produce
            context: Business context substituted into the slide template
            options: Model, sampling and cancellation options

        Returns:
            GenerationResult whose content is a GeneratedSlide on success

        Raises:
            GenerationCancelledError: If the caller's token fires mid-call
        """
        options = options or GenerationOptions()
        return await self._run(
            ContentKind.SLIDE,
            options,
            lambda backend: backend.generate_slide_content(slide_type, context, options),
        )

    async def generate_freeform_deck(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult:
        """Generate a full deck from a natural-language description."""
        options = options or GenerationOptions()
        return await self._run(
            ContentKind.FREEFORM_DECK,
            options,
            lambda backend: backend.generate_freeform_deck(prompt, options, preferences),
        )

    async def generate_chat(
        self,
        message: str,
        deck_context: Optional[Dict[str, Any]] = None,
        slide_context: Optional[Dict[str, Any]] = None,
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult:
        options = options or GenerationOptions()
        return await self._run(
            ContentKind.CHAT,
            options,
            lambda backend: backend.generate_chat_response(
                message, deck_context, slide_context, options
            ),
        )

    async def improve_speaker_notes(
        self,
        slide_title: str,
        slide_type: str,
        slide_content: str,
        current_notes: str,
        improvement_type: str = "clarity",
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult:
        """Rewrite a slide's speaker notes; runs through the chat fallback path."""
        prompt = PitchDeckPrompts.build_speaker_notes_prompt(
            slide_title=slide_title,
            slide_type=slide_type,
            slide_content=slide_content,
            current_notes=current_notes,
            improvement_type=improvement_type,
        )
        return await self.generate_chat(
            prompt,
            deck_context={"title": slide_title, "mode": "speaker notes"},
            slide_context={"title": slide_title, "slide_type": slide_type},
            options=options,
        )

    async def list_providers(self) -> List[ProviderDescriptor]:
        """
        Catalog entries with live status.

        Each backend is probed once, concurrently, and its status is shared by
        every descriptor that belongs to it.
        """
        names = sorted({d.backend for d in self.descriptors})
        statuses = await asyncio.gather(*(self._probe(name) for name in names))
        by_backend = dict(zip(names, statuses))
        return [d.with_status(by_backend[d.backend]) for d in self.descriptors]

    # ---------- fallback machinery ----------
    async def _probe(self, name: str) -> ProviderStatus:
        backend = self.backends.get(name)
        if backend is None:
            return ProviderStatus.UNAVAILABLE
        try:
            status = await backend.get_status()
        except Exception as e:
            # One broken probe must not sink the whole listing
            classified = self.classifier.classify(e, name, "status probe")
            self._log.warning(
                "backend.status.failed",
                provider=name,
                error_kind=classified.kind.value,
                error=classified.message,
            )
            return ProviderStatus.UNAVAILABLE
        self._log.info("backend.status", provider=name, status=status.value)
        return status

    async def _run(
        self, kind: ContentKind, options: GenerationOptions, call: BackendCall
    ) -> GenerationResult:
        order = order_backends(options.model)
        self._log.info(
            "generation.start",
            operation=kind.value,
            requested_model=options.model,
            order=order,
        )
        try:
            for index, name in enumerate(order):
                attempt = await self._attempt(kind, name, index, options, call)
                if attempt.succeeded:
                    result = _to_result(kind, attempt)
                    metrics.record_result(kind.value, "success")
                    metrics.record_llm_usage(result.model, result.tokens_used or 0)
                    self._log.info(
                        "generation.success",
                        operation=kind.value,
                        provider=result.provider,
                        model=result.model,
                        tokens_used=result.tokens_used,
                        confidence=result.confidence,
                    )
                    return result
        except GenerationCancelledError as e:
            metrics.record_result(kind.value, "cancelled")
            self._log.info("generation.cancelled", operation=kind.value, reason=e.reason)
            raise

        metrics.record_result(kind.value, "exhausted")
        self._log.error("generation.exhausted", operation=kind.value, order=order)
        return GenerationResult.all_failed()

    async def _attempt(
        self,
        kind: ContentKind,
        name: str,
        index: int,
        options: GenerationOptions,
        call: BackendCall,
    ) -> AttemptResult:
        token = options.cancel_token
        if token is not None:
            token.raise_if_cancelled()

        backend = self.backends.get(name)
        if backend is None:
            self._log.warning("generation.attempt.skipped", provider=name, reason="not registered")
            metrics.record_attempt(name, kind.value, "skipped")
            return AttemptResult(provider=name, skipped=True)

        self._log.info("generation.attempt.start", provider=name, attempt=index, operation=kind.value)
        started = time.perf_counter()
        try:
            async with trace_operation(
                f"generation.{kind.value}", provider=name, attempt=index
            ):
                value = await run_guarded(call(backend), token)
                problem = _shape_error(kind, value)
                if problem:
                    raise InvalidResponseError(name, problem)
        except GenerationCancelledError:
            raise
        except Exception as e:
            duration = time.perf_counter() - started
            classified = self.classifier.classify(e, name, _OPERATION_LABELS[kind])
            metrics.record_attempt(name, kind.value, "failure", duration)
            metrics.record_provider_error(name, classified.kind.value)
            self._log.warning(
                "generation.attempt.failed",
                provider=name,
                operation=kind.value,
                error_kind=classified.kind.value,
                retryable=classified.retryable,
                error=classified.message,
                duration=round(duration, 3),
            )
            return AttemptResult(provider=name, error=classified, duration=duration)

        duration = time.perf_counter() - started
        metrics.record_attempt(name, kind.value, "success", duration)
        return AttemptResult(provider=name, value=value, duration=duration)
