"""Global test configuration and fixtures."""

import os

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["PROMETHEUS_METRICS_ENABLED"] = "false"
os.environ["OPENAI_API_KEY"] = "dummy-key-for-test"
os.environ["GROQ_ENABLED"] = "false"
os.environ["OLLAMA_ENABLED"] = "false"

from pitchdeck_ai.application.services import GenerationOrchestrator
from pitchdeck_ai.domain.entities import SlideContext
from pitchdeck_ai.infra.llm import PROVIDER_CATALOG
from tests._helpers.fakes import FakeBackend, make_chat, make_deck, make_slide


@pytest.fixture
def slide_context():
    """Business context for a fictional fintech startup."""
    return SlideContext(
        company_name="LedgerLoop",
        industry="Fintech",
        target_market="Small businesses in Southeast Asia",
    )


@pytest.fixture
def sample_slide_response():
    """Well-formed model output for a market slide."""
    return (
        "Title: Market Opportunity\n"
        "Content: TAM is $10B\n"
        "• SAM of $2 billion across 6 countries\n"
        "\n"
        "Growth: 20% CAGR\n"
        "Speaker Notes: Emphasize the timing.\n"
    )


@pytest.fixture
def sample_deck_response():
    """Three SLIDE blocks; the third is missing its Content label."""
    return (
        "SLIDE 1: Cover\n"
        "Title: LedgerLoop\n"
        "Content: Bookkeeping on autopilot.\n"
        "---\n"
        "SLIDE 2: Business Model\n"
        "Title: How We Make Money\n"
        "Content: - $29/month subscription\n- 2% payment fee\n"
        "---\n"
        "SLIDE 3: Team\n"
        "Title: Our Team\n"
        "---\n"
    )


@pytest.fixture
def fake_backends():
    """One healthy fake per backend name."""
    return {
        "groq": FakeBackend("groq", result=make_slide(model="groq:llama3-70b-8192")),
        "openai": FakeBackend("openai", result=make_slide(model="gpt-4")),
        "local": FakeBackend("local", result=make_slide(model="ollama:llama3.1:8b")),
    }


@pytest.fixture
def orchestrator(fake_backends):
    return GenerationOrchestrator(fake_backends, descriptors=PROVIDER_CATALOG)


@pytest.fixture
def sample_deck():
    return make_deck()


@pytest.fixture
def sample_chat():
    return make_chat()


# ---------- API TESTING FIXTURES ----------


@pytest.fixture
def app():
    """FastAPI application instance for testing."""
    from pitchdeck_ai.main import app

    return app


@pytest.fixture
def client(app, orchestrator):
    """Test client wired to the fake-backed orchestrator; lifespan is not run."""
    from fastapi.testclient import TestClient

    from pitchdeck_ai.api.dependencies import get_cancel_token
    from pitchdeck_ai.application.cancellation import CancellationToken
    from pitchdeck_ai.infra.config.dependencies import get_orchestrator

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_cancel_token] = lambda: CancellationToken()
    yield TestClient(app)
    app.dependency_overrides.clear()
