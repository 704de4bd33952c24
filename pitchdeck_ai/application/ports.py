"""
Application ports - abstract interfaces for external dependencies.

Every generation backend (cloud-keyed, rate-limited cloud, local) is driven
through the same four-operation port, so the orchestrator never needs to know
which variant it is talking to.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pitchdeck_ai.domain.entities import (
    GeneratedChat,
    GeneratedDeck,
    GeneratedSlide,
    GenerationOptions,
    SlideContext,
)
from pitchdeck_ai.domain.value_objects import ProviderStatus, SlideType


class GenerationBackendPort(ABC):
    """Abstract interface for one upstream text-generation backend."""

    #: Registry key used by the orchestrator's ordering policy.
    name: str = ""

    @abstractmethod
    async def generate_slide_content(
        self,
        slide_type: SlideType,
        context: SlideContext,
        options: GenerationOptions,
    ) -> GeneratedSlide:
        """Generate a single structured slide."""
        pass

    @abstractmethod
    async def generate_freeform_deck(
        self,
        prompt: str,
        options: GenerationOptions,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> GeneratedDeck:
        """Generate a multi-slide deck from a natural-language prompt."""
        pass

    @abstractmethod
    async def generate_chat_response(
        self,
        message: str,
        deck_context: Optional[Dict[str, Any]],
        slide_context: Optional[Dict[str, Any]],
        options: GenerationOptions,
    ) -> GeneratedChat:
        """Generate a conversational reply about a deck or slide."""
        pass

    @abstractmethod
    async def get_status(self) -> ProviderStatus:
        """Probe the backend with the cheapest possible request."""
        pass

    def configuration_warnings(self) -> list[str]:
        """Human-readable reasons this backend will refuse to run, if any."""
        return []
