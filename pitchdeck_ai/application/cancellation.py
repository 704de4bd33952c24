"""
Cooperative cancellation for in-flight generation requests.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

from pitchdeck_ai.domain.exceptions import GenerationCancelledError

T = TypeVar("T")


class CancellationToken:
    """
    A one-shot signal threaded from the caller down to each backend call.

    Backends wrap their outbound awaitables with ``guard`` so that a cancel
    aborts the request currently on the wire, not just the next attempt.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "generation cancelled by caller") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelledError(self._reason or "generation cancelled")

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first."""
        self.raise_if_cancelled()
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except BaseException:
            work.cancel()
            waiter.cancel()
            raise
        if work in done:
            waiter.cancel()
            return work.result()
        work.cancel()
        raise GenerationCancelledError(self._reason or "generation cancelled")


async def run_guarded(
    awaitable: Awaitable[T], token: Optional[CancellationToken]
) -> T:
    """Await directly when no token was supplied."""
    if token is None:
        return await awaitable
    return await token.guard(awaitable)
