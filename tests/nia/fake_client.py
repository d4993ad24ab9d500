"""Fake NiaClient for use in tests — scripted submit results and status sequences."""

import asyncio

from lib_bench.nia.domain.source import SubmittedSource
from lib_bench.nia.domain.target import NiaTarget


class FakeNiaClient:
    """Answers submit() from ``initial`` and status() from per-source scripts.

    ``initial`` maps a display name to the status returned on submission,
    or to an Exception to raise. Each source id is ``src-<display name>``.
    A status script repeats its last entry once exhausted.
    """

    def __init__(
        self,
        initial: dict[str, str | Exception],
        statuses: dict[str, list[str]] | None = None,
        submit_delay: float = 0.0,
    ) -> None:
        self._initial = initial
        self._statuses = statuses or {}
        self._submit_delay = submit_delay
        self.submitted: list[str] = []
        self.polled: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def submit(self, target: NiaTarget) -> SubmittedSource:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self._submit_delay)
            self.submitted.append(target.display_name)
            effect = self._initial[target.display_name]
            if isinstance(effect, Exception):
                raise effect
            return SubmittedSource(
                target=target,
                source_id=f"src-{target.display_name}",
                status=effect,
            )
        finally:
            self.in_flight -= 1

    async def status(self, source_id: str) -> str:
        self.polled.append(source_id)
        script = self._statuses[source_id]
        seen = self.polled.count(source_id)
        return script[min(seen, len(script)) - 1]
