"""
FastAPI dependencies for the generation routes.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status

from pitchdeck_ai.application.cancellation import CancellationToken
from pitchdeck_ai.application.services import GenerationOrchestrator
from pitchdeck_ai.domain.entities import GenerationResult
from pitchdeck_ai.infra.config.dependencies import get_orchestrator
from pitchdeck_ai.infra.config.logging_config import get_logger

DISCONNECT_POLL_INTERVAL = 0.5

log = get_logger("api.dependencies")


@asynccontextmanager
async def cancellation_on_disconnect(
    request: Request, poll_interval: float = DISCONNECT_POLL_INTERVAL
) -> AsyncIterator[CancellationToken]:
    """Yield a token that fires if the HTTP client goes away mid-generation."""
    token = CancellationToken()

    async def watch() -> None:
        while not token.cancelled:
            if await request.is_disconnected():
                log.info("request.client_disconnected")
                token.cancel("client disconnected")
                return
            await asyncio.sleep(poll_interval)

    watcher = asyncio.create_task(watch())
    try:
        yield token
    finally:
        watcher.cancel()


async def get_cancel_token(request: Request) -> AsyncIterator[CancellationToken]:
    async with cancellation_on_disconnect(request) as token:
        yield token


def raise_if_failed(result: GenerationResult) -> GenerationResult:
    """Exhaustion is reported as 503 with the generic message only."""
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error
        )
    return result


# Type aliases for cleaner dependency injection
OrchestratorDep = Annotated[GenerationOrchestrator, Depends(get_orchestrator)]
CancelTokenDep = Annotated[CancellationToken, Depends(get_cancel_token)]
