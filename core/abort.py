"""
Request-scoped cancellation.

An AbortSignal is created per chat request and threaded through the stream
coordinator and every tool call made on behalf of that request.
"""

import asyncio
from contextlib import suppress
from typing import Awaitable, TypeVar

from .exceptions import AbortedError

T = TypeVar("T")


class AbortSignal:
    """One-shot cancellation flag that awaiting code can race against."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    def abort(self, reason: str = "Request aborted") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the signal fires first.

        Raises:
            AbortedError: If the signal fired before the awaitable completed.
                The awaitable is cancelled.
        """
        if self.aborted:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise AbortedError(self.reason or "Request aborted")

        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            # work must have stopped running before the caller can close it
            work.cancel()
            waiter.cancel()
            with suppress(asyncio.CancelledError):
                await work
            raise

        if work in done:
            waiter.cancel()
            return work.result()

        work.cancel()
        with suppress(asyncio.CancelledError):
            await work
        raise AbortedError(self.reason or "Request aborted")
