"""
Maps caught backend failures onto the seven-kind error taxonomy.

Structured signals are read first: the ``kind`` carried by our own
GenerationError subclasses, then the exception types and status codes exposed
by the openai and httpx clients. Message substring matching is only the last
resort for causes that carry nothing else.
"""

import asyncio
import errno
import socket
from typing import Optional

import httpx
import openai

from pitchdeck_ai.domain.exceptions import GenerationError
from pitchdeck_ai.domain.value_objects import ClassifiedError, ErrorKind

RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.NETWORK_ERROR,
        ErrorKind.TIMEOUT_ERROR,
        ErrorKind.API_ERROR,
        ErrorKind.QUOTA_EXCEEDED,
    }
)

_NETWORK_CODES = {"ECONNREFUSED", "ENOTFOUND"}
_NETWORK_ERRNOS = {errno.ECONNREFUSED}
_NETWORK_MESSAGES = (
    "econnrefused",
    "enotfound",
    "connection refused",
    "name or service not known",
    "nodename nor servname",
)
_TRANSIENT_KINDS = frozenset(
    {ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT_ERROR, ErrorKind.QUOTA_EXCEEDED}
)


def _message_of(error: BaseException) -> str:
    return str(getattr(error, "message", None) or error)


def _status_code(error: BaseException) -> Optional[int]:
    for candidate in (
        getattr(error, "status_code", None),
        getattr(error, "status", None),
        getattr(getattr(error, "response", None), "status_code", None),
    ):
        if isinstance(candidate, int) and not isinstance(candidate, bool):
            return candidate
    return None


def _is_network_failure(error: BaseException, lowered: str) -> bool:
    if isinstance(error, openai.APITimeoutError):
        return False
    if isinstance(
        error,
        (
            httpx.ConnectError,
            openai.APIConnectionError,
            ConnectionRefusedError,
            socket.gaierror,
        ),
    ):
        return True
    if getattr(error, "code", None) in _NETWORK_CODES:
        return True
    if getattr(error, "errno", None) in _NETWORK_ERRNOS:
        return True
    return any(fragment in lowered for fragment in _NETWORK_MESSAGES)


def _is_timeout(error: BaseException, lowered: str) -> bool:
    if isinstance(
        error,
        (httpx.TimeoutException, openai.APITimeoutError, TimeoutError, asyncio.TimeoutError),
    ):
        return True
    if getattr(error, "code", None) == "ETIMEDOUT":
        return True
    return "timeout" in lowered or "timed out" in lowered


class ErrorClassifier:
    """Classifies failures and answers retry/backoff questions about them."""

    def __init__(
        self, max_retries: int = 2, base_delay: float = 1.0, max_delay: float = 10.0
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

    def classify(
        self, error: BaseException, provider: str, operation: str = ""
    ) -> ClassifiedError:
        """
        Normalize ``error`` raised by ``provider`` during ``operation``.

        Args:
            error: The caught exception
            provider: Backend name the error came from
            operation: Short label such as "slide generation"

        Returns:
            ClassifiedError with kind, retryability and a log-friendly message
        """
        message = _message_of(error)
        lowered = message.lower()

        def build(kind: ErrorKind, retryable: bool, text: str) -> ClassifiedError:
            return ClassifiedError(
                kind=kind,
                retryable=retryable,
                provider=provider,
                message=text,
                operation=operation,
                original_cause=error,
            )

        if isinstance(error, GenerationError) and error.kind is not None:
            return build(error.kind, error.kind in _TRANSIENT_KINDS, message)

        if _is_network_failure(error, lowered):
            return build(ErrorKind.NETWORK_ERROR, True, f"Cannot connect to {provider} service")

        if _is_timeout(error, lowered):
            return build(ErrorKind.TIMEOUT_ERROR, True, f"{provider} request timed out")

        status = _status_code(error)
        if status is not None:
            if status == 401:
                return build(
                    ErrorKind.CONFIGURATION_ERROR,
                    False,
                    f"{provider} authentication failed - check API key",
                )
            if status == 429:
                return build(ErrorKind.QUOTA_EXCEEDED, True, f"{provider} rate limit exceeded")
            if 500 <= status < 600:
                return build(ErrorKind.API_ERROR, True, f"{provider} server error ({status})")
            return build(
                ErrorKind.API_ERROR, False, f"{provider} API error ({status}): {message}"
            )

        if "parse" in lowered or "invalid response" in lowered:
            return build(
                ErrorKind.PARSING_ERROR,
                False,
                f"Failed to parse {provider} response: {message}",
            )

        if "not configured" in lowered or "missing api key" in lowered:
            return build(
                ErrorKind.CONFIGURATION_ERROR,
                False,
                f"{provider} configuration error: {message}",
            )

        return build(ErrorKind.API_ERROR, False, f"{provider} {operation} failed: {message}")

    def should_retry(
        self,
        classified: ClassifiedError,
        attempt_count: int,
        max_retries: Optional[int] = None,
    ) -> bool:
        limit = self.max_retries if max_retries is None else max_retries
        if attempt_count >= limit:
            return False
        return classified.retryable and classified.kind in RETRYABLE_KINDS

    def backoff_delay(self, attempt_count: int) -> float:
        """Exponential backoff in seconds: 1, 2, 4, ... capped at 10."""
        return min(self.base_delay * (2**attempt_count), self.max_delay)

    @staticmethod
    def format_error_for_user(classified: ClassifiedError) -> str:
        return classified.kind.user_message
