"""
Process-wide wiring of the generation orchestrator.
"""

from typing import Optional

from pitchdeck_ai.application.services import GenerationOrchestrator
from pitchdeck_ai.infra.config.settings import Settings, get_settings
from pitchdeck_ai.infra.llm import PROVIDER_CATALOG, build_backends

_orchestrator: Optional[GenerationOrchestrator] = None


def build_orchestrator(settings: Optional[Settings] = None) -> GenerationOrchestrator:
    settings = settings or get_settings()
    return GenerationOrchestrator(
        backends=build_backends(settings), descriptors=PROVIDER_CATALOG
    )


def get_orchestrator() -> GenerationOrchestrator:
    """Backend configuration is read once; the orchestrator is shared by all requests."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator()
    return _orchestrator


def reset_orchestrator() -> None:
    global _orchestrator
    _orchestrator = None
