"""
Unit tests for the backend ordering policy.
"""

import pytest

from pitchdeck_ai.application.services.backend_order import (
    DEFAULT_FALLBACK_ORDER,
    order_backends,
)


class TestOrderBackends:
    @pytest.mark.parametrize(
        "model", ["llama3.1-8b", "llama3.1-instruct", "llama3.1-70b", "local"]
    )
    def test_local_models_try_local_first(self, model):
        assert order_backends(model) == ["local", "groq", "openai"]

    @pytest.mark.parametrize("model", ["groq-llama-8b", "groq-llama-70b", "groq-gemma"])
    def test_groq_prefix_tries_groq_first(self, model):
        assert order_backends(model) == ["groq", "openai", "local"]

    @pytest.mark.parametrize("model", [None, "", "gpt-4", "openai", "llama3.1:8b"])
    def test_everything_else_uses_default_order(self, model):
        assert order_backends(model) == list(DEFAULT_FALLBACK_ORDER)
        assert order_backends(model) == ["groq", "openai", "local"]

    def test_order_is_deterministic_and_fresh(self):
        first = order_backends("llama3.1-8b")
        first.append("mutated")

        assert order_backends("llama3.1-8b") == ["local", "groq", "openai"]
