"""FIFO admission control for concurrently dispatched work."""

import asyncio
from collections import deque
from types import TracebackType


class AsyncSemaphore:
    """Counting semaphore that admits waiters strictly in arrival order.

    A release with callers waiting hands the permit directly to the oldest
    waiter, so a late arrival can never overtake the queue.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        self._limit = limit
        self._holders = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    async def acquire(self) -> None:
        if self._holders < self._limit and not self._waiters:
            self._holders += 1
            return

        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                # The permit was handed over just before cancellation landed.
                self.release()
            elif fut in self._waiters:
                self._waiters.remove(fut)
            raise

    def release(self) -> None:
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                fut.set_result(None)
                return
        if self._holders == 0:
            raise RuntimeError("release() called without a matching acquire()")
        self._holders -= 1

    async def __aenter__(self) -> None:
        await self.acquire()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
