"""Counting admission gate with FIFO hand-off for outbound model calls."""

import asyncio
import logging
from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENT = 5


class ConcurrencyGate:
    """Limit how many guarded calls run at once.

    A released permit goes straight to the oldest waiter instead of back to
    the counter, so a newcomer can never overtake a queued caller and a woken
    waiter never has to re-check the count.
    """

    def __init__(self, permits: int = DEFAULT_MAX_CONCURRENT) -> None:
        if permits < 1:
            raise ValueError(f"permits must be a positive integer, got {permits}")
        self._limit = permits
        self._permits = permits
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def available(self) -> int:
        return self._permits

    @property
    def waiting(self) -> int:
        return sum(1 for w in self._waiters if not w.done())

    @property
    def in_use(self) -> int:
        return self._limit - self._permits

    async def acquire(self) -> None:
        if self._permits > 0:
            self._permits -= 1
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        logger.debug("Gate full (%d in use), %d waiting", self.in_use, len(self._waiters))
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Permit was handed over just before the cancel landed
                self.release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        if self._permits >= self._limit:
            raise RuntimeError("ConcurrencyGate released more times than acquired")
        self._permits += 1

    @asynccontextmanager
    async def permit(self) -> AsyncIterator[None]:
        await self.acquire()
        try:
            yield
        finally:
            self.release()

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Await ``fn()`` while holding a permit."""
        async with self.permit():
            return await fn()
