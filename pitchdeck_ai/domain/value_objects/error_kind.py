"""
Generation error taxonomy value objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIGURATION_ERROR = "configuration_error"
    API_ERROR = "api_error"
    PARSING_ERROR = "parsing_error"
    TIMEOUT_ERROR = "timeout_error"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_RESPONSE = "invalid_response"
    NETWORK_ERROR = "network_error"

    @property
    def user_message(self) -> str:
        """One short sentence suitable for showing to an end user."""
        return _USER_MESSAGES.get(
            self, "AI service temporarily unavailable. Please try again."
        )


_USER_MESSAGES = {
    ErrorKind.CONFIGURATION_ERROR: "AI service configuration issue. Please check your settings.",
    ErrorKind.QUOTA_EXCEEDED: "AI service quota exceeded. Please try again later.",
    ErrorKind.NETWORK_ERROR: "Cannot connect to AI service. Please check your internet connection.",
    ErrorKind.TIMEOUT_ERROR: "AI service request timed out. Please try again.",
    ErrorKind.PARSING_ERROR: "AI service returned an unexpected response format.",
    ErrorKind.INVALID_RESPONSE: "AI service returned an empty or invalid response.",
}


@dataclass(frozen=True)
class ClassifiedError:
    """A caught backend failure normalized into the taxonomy."""

    kind: ErrorKind
    retryable: bool
    provider: str
    message: str
    operation: str = ""
    original_cause: Optional[BaseException] = None

    @property
    def user_message(self) -> str:
        return self.kind.user_message
