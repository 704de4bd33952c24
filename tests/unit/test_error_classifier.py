"""
Unit tests for error classification, retry and backoff policy.
"""

import errno
import socket

import httpx
import openai
import pytest

from pitchdeck_ai.application.services.error_classifier import ErrorClassifier
from pitchdeck_ai.domain.exceptions import (
    EmptyResponseError,
    InvalidResponseError,
    ProviderNotConfiguredError,
    ResponseParseError,
)
from pitchdeck_ai.domain.value_objects import ErrorKind


class StatusError(Exception):
    """Minimal stand-in for an SDK error that only exposes a status code."""

    def __init__(self, status: int, message: str = "request failed") -> None:
        super().__init__(message)
        self.status = status


def openai_status_error(status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return openai.APIStatusError("upstream error", response=response, body=None)


@pytest.fixture
def classifier():
    return ErrorClassifier()


class TestClassify:
    def test_rate_limit_is_retryable_quota(self, classifier):
        result = classifier.classify(StatusError(429), "groq", "slide generation")

        assert result.kind is ErrorKind.QUOTA_EXCEEDED
        assert result.retryable is True
        assert result.provider == "groq"
        assert result.operation == "slide generation"

    def test_unauthorized_is_non_retryable_configuration(self, classifier):
        result = classifier.classify(StatusError(401), "openai")

        assert result.kind is ErrorKind.CONFIGURATION_ERROR
        assert result.retryable is False

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_server_errors_are_retryable(self, classifier, status):
        result = classifier.classify(StatusError(status), "openai")

        assert result.kind is ErrorKind.API_ERROR
        assert result.retryable is True

    def test_other_status_is_non_retryable_api_error(self, classifier):
        result = classifier.classify(StatusError(400), "openai")

        assert result.kind is ErrorKind.API_ERROR
        assert result.retryable is False

    def test_openai_sdk_status_code_is_read(self, classifier):
        result = classifier.classify(openai_status_error(429), "openai")

        assert result.kind is ErrorKind.QUOTA_EXCEEDED

    def test_httpx_status_error_is_read(self, classifier):
        request = httpx.Request("POST", "http://localhost:11434/api/generate")
        response = httpx.Response(503, request=request)
        error = httpx.HTTPStatusError("unavailable", request=request, response=response)

        result = classifier.classify(error, "local")

        assert result.kind is ErrorKind.API_ERROR
        assert result.retryable is True

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("All connection attempts failed"),
            ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"),
            socket.gaierror(-2, "Name or service not known"),
            RuntimeError("connect ECONNREFUSED 127.0.0.1:11434"),
        ],
    )
    def test_network_failures(self, classifier, error):
        result = classifier.classify(error, "local")

        assert result.kind is ErrorKind.NETWORK_ERROR
        assert result.retryable is True

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ReadTimeout("read timed out"),
            TimeoutError(),
            openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com")),
            RuntimeError("Request timeout after 60000ms"),
        ],
    )
    def test_timeouts(self, classifier, error):
        result = classifier.classify(error, "openai")

        assert result.kind is ErrorKind.TIMEOUT_ERROR
        assert result.retryable is True

    def test_structured_kinds_take_precedence_over_message(self, classifier):
        # The message mentions a timeout, but the structured kind wins
        error = ResponseParseError("timeout marker found in body", "groq")

        result = classifier.classify(error, "groq")

        assert result.kind is ErrorKind.PARSING_ERROR
        assert result.retryable is False

    @pytest.mark.parametrize(
        "error, kind",
        [
            (ProviderNotConfiguredError("openai"), ErrorKind.CONFIGURATION_ERROR),
            (InvalidResponseError("openai"), ErrorKind.INVALID_RESPONSE),
            (EmptyResponseError("openai"), ErrorKind.INVALID_RESPONSE),
        ],
    )
    def test_own_errors_map_by_kind(self, classifier, error, kind):
        result = classifier.classify(error, "openai")

        assert result.kind is kind
        assert result.retryable is False

    def test_unstructured_message_fallbacks(self, classifier):
        parsing = classifier.classify(ValueError("could not parse body"), "groq")
        config = classifier.classify(RuntimeError("Groq not configured"), "groq")
        other = classifier.classify(RuntimeError("boom"), "groq", "chat response")

        assert parsing.kind is ErrorKind.PARSING_ERROR
        assert config.kind is ErrorKind.CONFIGURATION_ERROR
        assert other.kind is ErrorKind.API_ERROR
        assert other.retryable is False
        assert other.original_cause is not None


class TestRetryPolicy:
    def test_should_retry_respects_kind_and_attempts(self, classifier):
        transient = classifier.classify(StatusError(503), "openai")
        permanent = classifier.classify(StatusError(401), "openai")

        assert classifier.should_retry(transient, 0) is True
        assert classifier.should_retry(transient, 1) is True
        assert classifier.should_retry(transient, 2) is False
        assert classifier.should_retry(permanent, 0) is False

    def test_explicit_max_retries(self, classifier):
        transient = classifier.classify(StatusError(429), "groq")

        assert classifier.should_retry(transient, 2, max_retries=5) is True

    @pytest.mark.parametrize(
        "attempt, delay", [(0, 1.0), (1, 2.0), (2, 4.0), (3, 8.0), (4, 10.0), (10, 10.0)]
    )
    def test_backoff_is_exponential_and_capped(self, classifier, attempt, delay):
        assert classifier.backoff_delay(attempt) == delay


class TestUserMessages:
    def test_quota_message(self, classifier):
        classified = classifier.classify(StatusError(429), "openai")

        assert (
            classifier.format_error_for_user(classified)
            == "AI service quota exceeded. Please try again later."
        )

    def test_every_kind_has_a_sentence(self):
        for kind in ErrorKind:
            assert kind.user_message.endswith(".")
