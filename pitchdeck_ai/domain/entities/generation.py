"""
Request-scoped generation entities.

Nothing here outlives a single orchestration call except ProviderDescriptor,
which is static catalog configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pitchdeck_ai.domain.value_objects.provider_status import CostTier, ProviderStatus
from pitchdeck_ai.domain.value_objects.slide_type import SlideType

if TYPE_CHECKING:
    from pitchdeck_ai.application.cancellation import CancellationToken


ALL_PROVIDERS_FAILED = "All AI providers failed"
NO_PROVIDER = "none"


class ContentKind(str, Enum):
    SLIDE = "slide"
    FREEFORM_DECK = "freeform_deck"
    CHAT = "chat"


@dataclass(frozen=True)
class GenerationOptions:
    """
    Caller options shared by every content kind.

    ``retry_count`` is owned by the backend adapters' single fallback-model
    retry; callers leave it at 0.
    """

    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    user_api_key: Optional[str] = None
    retry_count: int = 0
    cancel_token: Optional["CancellationToken"] = field(
        default=None, compare=False, repr=False
    )

    def for_retry(self) -> "GenerationOptions":
        return replace(self, retry_count=self.retry_count + 1)


@dataclass
class SlideContext:
    """Business context substituted into per-slide prompt templates."""

    company_name: Optional[str] = None
    industry: Optional[str] = None
    target_market: Optional[str] = None
    user_feedback: Optional[str] = None
    user_preferences: Optional[Dict[str, Any]] = None
    previous_content: Optional[str] = None


@dataclass
class ParsedSlide:
    title: str
    content: str
    speaker_notes: Optional[str] = None

    def is_complete(self) -> bool:
        """Business rule: a slide needs both a title and a body."""
        return bool(self.title.strip()) and bool(self.content.strip())


@dataclass
class ParsedDeckSlide:
    slide_order: int
    slide_type: SlideType
    title: str
    content: str
    speaker_notes: Optional[str] = None


@dataclass
class GeneratedSlide:
    """A parsed slide augmented with generation metadata."""

    title: str
    content: str
    model: str
    tokens_used: int = 0
    confidence: Optional[float] = None
    speaker_notes: Optional[str] = None


@dataclass
class GeneratedDeck:
    slides: List[ParsedDeckSlide]
    model: str
    tokens_used: int = 0
    confidence: Optional[float] = None


@dataclass
class GeneratedChat:
    text: str
    model: str
    tokens_used: int = 0


@dataclass
class GenerationResult:
    """
    Uniform orchestration outcome.

    ``content`` is a GeneratedSlide, a list of ParsedDeckSlide or chat text
    depending on the content kind.
    """

    success: bool
    provider: str
    model: str
    content: Any = None
    error: Optional[str] = None
    tokens_used: Optional[int] = None
    confidence: Optional[float] = None

    def __post_init__(self) -> None:
        if self.success and self.content is None:
            raise ValueError("A successful generation result must carry content")

    @classmethod
    def all_failed(cls) -> "GenerationResult":
        """Sentinel result returned once every backend has been exhausted."""
        return cls(
            success=False,
            provider=NO_PROVIDER,
            model=NO_PROVIDER,
            error=ALL_PROVIDERS_FAILED,
        )


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    Catalog entry for one selectable provider/model family.

    ``backend`` names the adapter whose status probe answers for this entry;
    ``status`` is only filled in on listings returned by a live probe.
    """

    name: str
    display_name: str
    supported_models: Tuple[str, ...]
    cost_tier: CostTier
    is_local: bool
    backend: str
    status: Optional[ProviderStatus] = None

    def with_status(self, status: ProviderStatus) -> "ProviderDescriptor":
        return replace(self, status=status)
