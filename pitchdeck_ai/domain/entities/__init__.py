from .generation import (
    ContentKind,
    GeneratedChat,
    GeneratedDeck,
    GeneratedSlide,
    GenerationOptions,
    GenerationResult,
    ParsedDeckSlide,
    ParsedSlide,
    ProviderDescriptor,
    SlideContext,
)

__all__ = [
    "ContentKind",
    "GeneratedChat",
    "GeneratedDeck",
    "GeneratedSlide",
    "GenerationOptions",
    "GenerationResult",
    "ParsedDeckSlide",
    "ParsedSlide",
    "ProviderDescriptor",
    "SlideContext",
]
