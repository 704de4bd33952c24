"""
Conversational assistance endpoints.
"""

from fastapi import APIRouter, HTTPException

from pitchdeck_ai.api.dependencies import CancelTokenDep, OrchestratorDep, raise_if_failed
from pitchdeck_ai.api.schemas import (
    ChatRequest,
    ChatResponse,
    SpeakerNotesRequest,
    SpeakerNotesResponse,
)
from pitchdeck_ai.api.v1.generation import CLIENT_CLOSED_REQUEST
from pitchdeck_ai.domain.exceptions import GenerationCancelledError
from pitchdeck_ai.infra.config.logging_config import get_logger

router = APIRouter(prefix="/chat", tags=["chat"])
log = get_logger("api.chat")


@router.post("", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    orchestrator: OrchestratorDep,
    cancel_token: CancelTokenDep,
) -> ChatResponse:
    log.info("chat.request", message_len=len(request.message))
    try:
        result = await orchestrator.generate_chat(
            request.message,
            deck_context=request.deck_context,
            slide_context=request.slide_context,
            options=request.options.to_domain(cancel_token),
        )
    except GenerationCancelledError as e:
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail=e.reason)

    raise_if_failed(result)
    return ChatResponse(
        provider=result.provider,
        model=result.model,
        tokens_used=result.tokens_used,
        content=result.content,
    )


@router.post("/speaker-notes", response_model=SpeakerNotesResponse)
async def improve_speaker_notes(
    request: SpeakerNotesRequest,
    orchestrator: OrchestratorDep,
    cancel_token: CancelTokenDep,
) -> SpeakerNotesResponse:
    log.info("speaker_notes.request", improvement_type=request.improvement_type)
    try:
        result = await orchestrator.improve_speaker_notes(
            slide_title=request.slide_title,
            slide_type=request.slide_type.value,
            slide_content=request.slide_content,
            current_notes=request.current_notes,
            improvement_type=request.improvement_type,
            options=request.options.to_domain(cancel_token),
        )
    except GenerationCancelledError as e:
        raise HTTPException(status_code=CLIENT_CLOSED_REQUEST, detail=e.reason)

    raise_if_failed(result)
    return SpeakerNotesResponse(
        provider=result.provider,
        model=result.model,
        tokens_used=result.tokens_used,
        content=result.content,
        original_notes=request.current_notes,
        improvement_type=request.improvement_type,
        slide_title=request.slide_title,
    )
