"""
Slide and freeform deck generation endpoints.
"""

from fastapi import APIRouter, HTTPException

from pitchdeck_ai.api.dependencies import CancelTokenDep, OrchestratorDep, raise_if_failed
from pitchdeck_ai.api.schemas import (
    DeckGenerationRequest,
    DeckGenerationResponse,
    DeckSlideOut,
    SlideGenerationRequest,
    SlideGenerationResponse,
    SlideOut,
)
from pitchdeck_ai.domain.exceptions import GenerationCancelledError
from pitchdeck_ai.infra.config.logging_config import bind_context, get_logger

router = APIRouter(prefix="/generation", tags=["generation"])
log = get_logger("api.generation")

CLIENT_CLOSED_REQUEST = 499


@router.post("/slide", response_model=SlideGenerationResponse)
async def generate_slide(
    request: SlideGenerationRequest,
    orchestrator: OrchestratorDep,
    cancel_token: CancelTokenDep,
) -> SlideGenerationResponse:
    bind_context(slide_type=request.slide_type.value)
    log.info("slide.generate.request", model=request.options.model)
    try:
        result = await orchestrator.generate_slide(
            request.slide_type,
            request.to_context(),
            request.options.to_domain(cancel_token),
        )
    except GenerationCancelledError as e:
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail=e.reason)

    raise_if_failed(result)
    return SlideGenerationResponse(
        provider=result.provider,
        model=result.model,
        tokens_used=result.tokens_used,
        confidence=result.confidence,
        content=SlideOut.model_validate(result.content),
    )


@router.post("/deck", response_model=DeckGenerationResponse)
async def generate_deck(
    request: DeckGenerationRequest,
    orchestrator: OrchestratorDep,
    cancel_token: CancelTokenDep,
) -> DeckGenerationResponse:
    """Generate a whole deck from a single natural-language description."""
    log.info(
        "deck.generate.request",
        prompt_len=len(request.prompt),
        model=request.options.model,
    )
    try:
        result = await orchestrator.generate_freeform_deck(
            request.prompt,
            request.options.to_domain(cancel_token),
            preferences=request.preferences,
        )
    except GenerationCancelledError as e:
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail=e.reason)

    raise_if_failed(result)
    return DeckGenerationResponse(
        provider=result.provider,
        model=result.model,
        tokens_used=result.tokens_used,
        confidence=result.confidence,
        content=[DeckSlideOut.model_validate(slide) for slide in result.content],
    )
