"""NiaClient port — the two source endpoints the setup phase relies on."""

from typing import Protocol

from lib_bench.nia.domain.source import SubmittedSource
from lib_bench.nia.domain.target import NiaTarget


class NiaClient(Protocol):
    async def submit(self, target: NiaTarget) -> SubmittedSource:
        """Ask for target to be indexed; idempotent for already-known sources."""
        ...

    async def status(self, source_id: str) -> str:
        """Current raw status of a source; never raises."""
        ...
