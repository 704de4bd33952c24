"""
Provider catalog endpoint.
"""

from fastapi import APIRouter

from pitchdeck_ai.api.dependencies import OrchestratorDep
from pitchdeck_ai.api.schemas import ProviderOut, ProvidersResponse
from pitchdeck_ai.infra.config.logging_config import get_logger

router = APIRouter(prefix="/ai", tags=["providers"])
log = get_logger("api.providers")


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(orchestrator: OrchestratorDep) -> ProvidersResponse:
    """All seven selectable providers with a live status probe."""
    descriptors = await orchestrator.list_providers()
    log.info(
        "providers.list",
        available=sum(1 for d in descriptors if d.status == "available"),
    )
    return ProvidersResponse(
        providers=[ProviderOut.model_validate(d) for d in descriptors]
    )
