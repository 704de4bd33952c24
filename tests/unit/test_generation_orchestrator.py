"""
Unit tests for the generation orchestrator's fallback state machine.
"""

import asyncio

import pytest
from structlog.testing import capture_logs

from pitchdeck_ai.application.cancellation import CancellationToken
from pitchdeck_ai.application.services import GenerationOrchestrator
from pitchdeck_ai.domain.entities import GenerationOptions, GenerationResult
from pitchdeck_ai.domain.exceptions import (
    GenerationCancelledError,
    ProviderNotConfiguredError,
)
from pitchdeck_ai.domain.value_objects import ProviderStatus, SlideType
from pitchdeck_ai.infra.llm import PROVIDER_CATALOG
from tests._helpers.fakes import FakeBackend, make_chat, make_deck, make_slide


def failing(name: str) -> FakeBackend:
    return FakeBackend(name, error=RuntimeError(f"{name} exploded"))


class TestShortCircuit:
    @pytest.mark.asyncio
    async def test_first_backend_success_stops_the_chain(
        self, orchestrator, fake_backends, slide_context
    ):
        result = await orchestrator.generate_slide(SlideType.MARKET, slide_context)

        assert result.success is True
        assert result.provider == "groq"
        assert result.model == "groq:llama3-70b-8192"
        assert fake_backends["groq"].calls == ["slide"]
        assert fake_backends["openai"].calls == []
        assert fake_backends["local"].calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("succeeding_index", [0, 1, 2])
    async def test_backends_after_success_are_never_invoked(
        self, slide_context, succeeding_index
    ):
        order = ["groq", "openai", "local"]
        backends = {
            name: (
                FakeBackend(name, result=make_slide(model=name))
                if i == succeeding_index
                else failing(name)
            )
            for i, name in enumerate(order)
        }
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_slide(SlideType.PROBLEM, slide_context)

        assert result.success is True
        assert result.provider == order[succeeding_index]
        for i, name in enumerate(order):
            expected = ["slide"] if i <= succeeding_index else []
            assert backends[name].calls == expected

    @pytest.mark.asyncio
    async def test_success_carries_metadata(self, fake_backends, slide_context):
        fake_backends["groq"].error = RuntimeError("rate limited")
        orchestrator = GenerationOrchestrator(fake_backends)

        result = await orchestrator.generate_slide(SlideType.MARKET, slide_context)

        assert result.provider == "openai"
        assert result.model == "gpt-4"
        assert result.tokens_used == 120
        assert result.confidence == 0.9
        assert result.content.title == "Market Opportunity"


class TestExhaustion:
    @pytest.mark.asyncio
    async def test_all_backends_failing_returns_generic_sentinel(self, slide_context):
        backends = {name: failing(name) for name in ("groq", "openai", "local")}
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_slide(SlideType.TEAM, slide_context)

        assert result == GenerationResult(
            success=False, provider="none", model="none", error="All AI providers failed"
        )
        assert all(b.calls == ["slide"] for b in backends.values())

    @pytest.mark.asyncio
    async def test_backend_specific_error_is_not_leaked(self, slide_context):
        backends = {
            "groq": FakeBackend("groq", error=ProviderNotConfiguredError("groq")),
            "openai": failing("openai"),
            "local": failing("local"),
        }
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_slide(SlideType.TEAM, slide_context)

        assert result.error == "All AI providers failed"
        assert "exploded" not in result.error

    @pytest.mark.asyncio
    async def test_missing_backend_is_skipped(self, slide_context):
        openai = FakeBackend("openai", result=make_slide())
        orchestrator = GenerationOrchestrator({"openai": openai})

        result = await orchestrator.generate_slide(SlideType.COVER, slide_context)

        assert result.success is True
        assert result.provider == "openai"


class TestInvalidResults:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad_result",
        [None, "not a slide", make_slide(content="   "), make_slide(title="")],
    )
    async def test_structurally_invalid_slide_falls_through(
        self, fake_backends, slide_context, bad_result
    ):
        fake_backends["groq"].result = bad_result
        orchestrator = GenerationOrchestrator(fake_backends)

        result = await orchestrator.generate_slide(SlideType.MARKET, slide_context)

        assert result.provider == "openai"
        assert fake_backends["groq"].calls == ["slide"]

    @pytest.mark.asyncio
    async def test_empty_deck_falls_through(self, slide_context):
        backends = {
            "groq": FakeBackend("groq", result=make_deck(count=0)),
            "openai": FakeBackend("openai", result=make_deck(count=3)),
        }
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_freeform_deck("A marketplace for tutors")

        assert result.provider == "openai"
        assert len(result.content) == 3

    @pytest.mark.asyncio
    async def test_blank_chat_falls_through(self):
        backends = {
            "groq": FakeBackend("groq", result=make_chat(text="  ")),
            "openai": FakeBackend("openai", result=make_chat(text="Show the churn curve.")),
        }
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_chat("What should I add?")

        assert result.provider == "openai"
        assert result.content == "Show the churn curve."


class TestOrdering:
    @pytest.mark.asyncio
    async def test_local_model_request_tries_local_first(self, slide_context):
        backends = {name: failing(name) for name in ("groq", "openai")}
        backends["local"] = FakeBackend("local", result=make_slide(model="ollama:llama3.1:8b"))
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_slide(
            SlideType.MARKET, slide_context, GenerationOptions(model="llama3.1-8b")
        )

        assert result.provider == "local"
        assert backends["groq"].calls == []
        assert backends["openai"].calls == []

    @pytest.mark.asyncio
    async def test_options_reach_the_backend(self, orchestrator, fake_backends, slide_context):
        options = GenerationOptions(model="groq-gemma", temperature=0.2, max_tokens=500)

        await orchestrator.generate_slide(SlideType.MARKET, slide_context, options)

        assert fake_backends["groq"].options_seen == [options]


class TestOtherOperations:
    @pytest.mark.asyncio
    async def test_freeform_deck_returns_slide_list(self):
        backends = {"groq": FakeBackend("groq", result=make_deck(model="groq:llama3-70b-8192"))}
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_freeform_deck("Carbon accounting SaaS")

        assert result.success is True
        assert [s.slide_order for s in result.content] == [0, 1]
        assert result.confidence == 0.8

    @pytest.mark.asyncio
    async def test_chat_returns_plain_text(self):
        backends = {"groq": FakeBackend("groq", result=make_chat(model="groq:llama3-70b-8192"))}
        orchestrator = GenerationOrchestrator(backends)

        result = await orchestrator.generate_chat(
            "How do I open?", deck_context={"title": "Seed"}, slide_context=None
        )

        assert result.content == "Lead with traction."
        assert result.confidence is None

    @pytest.mark.asyncio
    async def test_speaker_notes_run_through_chat(self):
        groq = FakeBackend("groq", result=make_chat(text="Open with the customer story."))
        orchestrator = GenerationOrchestrator({"groq": groq})

        result = await orchestrator.improve_speaker_notes(
            slide_title="Traction",
            slide_type="traction",
            slide_content="3x growth",
            current_notes="Say numbers",
            improvement_type="engagement",
        )

        assert result.content == "Open with the customer story."
        assert groq.calls == ["chat"]
        assert "more engaging and persuasive" in groq.last_message
        assert 'Slide Title: "Traction"' in groq.last_message


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_token_stops_before_first_attempt(
        self, orchestrator, fake_backends, slide_context
    ):
        token = CancellationToken()
        token.cancel("client disconnected")

        with pytest.raises(GenerationCancelledError, match="client disconnected"):
            await orchestrator.generate_slide(
                SlideType.MARKET, slide_context, GenerationOptions(cancel_token=token)
            )

        assert all(b.calls == [] for b in fake_backends.values())

    @pytest.mark.asyncio
    async def test_cancel_aborts_in_flight_attempt_without_fallback(self, slide_context):
        slow = FakeBackend("groq", result=make_slide(), delay=5)
        openai = FakeBackend("openai", result=make_slide())
        orchestrator = GenerationOrchestrator({"groq": slow, "openai": openai})
        token = CancellationToken()

        async def cancel_soon():
            await asyncio.sleep(0.01)
            token.cancel()

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(GenerationCancelledError):
            await orchestrator.generate_slide(
                SlideType.MARKET, slide_context, GenerationOptions(cancel_token=token)
            )
        await canceller

        assert slow.calls == ["slide"]
        assert openai.calls == []


class TestProviderListing:
    @pytest.mark.asyncio
    async def test_seven_descriptors_with_shared_status(self, fake_backends):
        fake_backends["groq"].status = ProviderStatus.QUOTA_EXCEEDED
        fake_backends["local"].status = ProviderStatus.UNAVAILABLE
        orchestrator = GenerationOrchestrator(fake_backends, descriptors=PROVIDER_CATALOG)

        providers = await orchestrator.list_providers()

        assert len(providers) == 7
        by_name = {p.name: p.status for p in providers}
        assert by_name["openai"] is ProviderStatus.AVAILABLE
        assert by_name["groq-llama-8b"] is ProviderStatus.QUOTA_EXCEEDED
        assert by_name["groq-gemma"] is ProviderStatus.QUOTA_EXCEEDED
        assert by_name["llama3.1-70b"] is ProviderStatus.UNAVAILABLE
        # One probe per backend, not per descriptor
        assert fake_backends["groq"].calls == ["status"]

    @pytest.mark.asyncio
    async def test_unregistered_backend_reports_unavailable(self):
        orchestrator = GenerationOrchestrator(
            {"openai": FakeBackend("openai")}, descriptors=PROVIDER_CATALOG
        )

        providers = await orchestrator.list_providers()

        local = [p for p in providers if p.is_local]
        assert len(local) == 3
        assert all(p.status is ProviderStatus.UNAVAILABLE for p in local)

    @pytest.mark.asyncio
    async def test_raising_probe_reports_unavailable_without_breaking_listing(
        self, fake_backends
    ):
        fake_backends["local"].status_error = AttributeError(
            "'list' object has no attribute 'get'"
        )
        orchestrator = GenerationOrchestrator(fake_backends, descriptors=PROVIDER_CATALOG)

        providers = await orchestrator.list_providers()

        assert len(providers) == 7
        by_name = {p.name: p.status for p in providers}
        assert by_name["llama3.1-8b"] is ProviderStatus.UNAVAILABLE
        assert by_name["openai"] is ProviderStatus.AVAILABLE
        assert by_name["groq-gemma"] is ProviderStatus.AVAILABLE

    def test_configuration_warnings_are_logged_at_construction(self):
        backend = FakeBackend("groq", warnings=["groq API key is missing or a placeholder"])

        with capture_logs() as logs:
            GenerationOrchestrator({"groq": backend})

        warnings = [entry for entry in logs if entry["event"] == "backend.config.invalid"]
        assert len(warnings) == 1
        assert warnings[0]["provider"] == "groq"
        assert warnings[0]["log_level"] == "warning"
