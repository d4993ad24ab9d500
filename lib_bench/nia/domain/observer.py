"""Observer port for the Nia setup phase — defines events in domain language."""

from typing import Protocol


class NiaObserver(Protocol):
    def targets_unmapped(self, keys: list[str]) -> None: ...

    def no_targets(self) -> None: ...

    def submitting(self, count: int) -> None: ...

    def submit_failed(self, display_name: str, reason: str) -> None: ...

    def source_cached(self, display_name: str, status: str) -> None: ...

    def source_pending(self, display_name: str, status: str) -> None: ...

    def waiting(
        self,
        count: int,
        max_wait_seconds: float,
        poll_interval_seconds: float,
    ) -> None: ...

    def source_ready(self, display_name: str) -> None: ...

    def source_failed(self, display_name: str, reason: str) -> None: ...

    def setup_finished(
        self,
        cached: int,
        indexed: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None: ...
