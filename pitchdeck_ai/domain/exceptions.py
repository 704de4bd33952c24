"""
Generation errors raised by backend adapters.

Each subclass carries a structured ``kind`` so the error classifier can map it
without inspecting the message text.
"""

from typing import Optional

from pitchdeck_ai.domain.value_objects.error_kind import ErrorKind


class GenerationError(Exception):
    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, provider: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider


class ProviderNotConfiguredError(GenerationError):
    kind = ErrorKind.CONFIGURATION_ERROR

    def __init__(self, provider: str, reason: str = "missing API key") -> None:
        super().__init__(f"{provider} provider is not configured: {reason}", provider)
        self.reason = reason


class InvalidResponseError(GenerationError):
    """The backend answered, but without a usable payload (null body, no choices)."""

    kind = ErrorKind.INVALID_RESPONSE

    def __init__(self, provider: str, detail: str = "no choices returned") -> None:
        super().__init__(f"Invalid response from {provider} API: {detail}", provider)


class EmptyResponseError(GenerationError):
    kind = ErrorKind.INVALID_RESPONSE

    def __init__(self, provider: str) -> None:
        super().__init__(f"Empty response from {provider} API", provider)


class ResponseParseError(GenerationError):
    kind = ErrorKind.PARSING_ERROR

    def __init__(self, reason: str, provider: Optional[str] = None) -> None:
        prefix = f"Failed to parse {provider} response" if provider else "Failed to parse response"
        super().__init__(f"{prefix}: {reason}", provider)
        self.reason = reason


class UnknownSlideTypeError(GenerationError):
    kind = ErrorKind.CONFIGURATION_ERROR

    def __init__(self, slide_type: str) -> None:
        super().__init__(f"No template found for slide type: {slide_type}")
        self.slide_type = slide_type


class GenerationCancelledError(Exception):
    """The caller withdrew the request; never classified, never falls back."""

    def __init__(self, reason: str = "generation cancelled by caller") -> None:
        super().__init__(reason)
        self.reason = reason
