"""CancellationToken — a cooperative, run-wide interruption flag."""

import asyncio


class CancellationToken:
    """Set once by the process boundary (e.g. a signal handler), read by the runner.

    Cancelling never interrupts work in flight; it only stops new work from
    being admitted.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
