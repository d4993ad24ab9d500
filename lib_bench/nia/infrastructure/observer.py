"""StructlogNiaObserver — production observer that delegates to structlog."""

import structlog


class StructlogNiaObserver:
    """Logs Nia setup events to structlog.

    Does NOT inherit from NiaObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def targets_unmapped(self, keys: list[str]) -> None:
        self._log.warning("nia.targets.unmapped", keys=keys)

    def no_targets(self) -> None:
        self._log.info("nia.targets.none")

    def submitting(self, count: int) -> None:
        self._log.info("nia.sources.submitting", count=count)

    def submit_failed(self, display_name: str, reason: str) -> None:
        self._log.warning(
            "nia.source.submit_failed", display_name=display_name, reason=reason
        )

    def source_cached(self, display_name: str, status: str) -> None:
        self._log.info("nia.source.cached", display_name=display_name, status=status)

    def source_pending(self, display_name: str, status: str) -> None:
        self._log.info("nia.source.pending", display_name=display_name, status=status)

    def waiting(
        self,
        count: int,
        max_wait_seconds: float,
        poll_interval_seconds: float,
    ) -> None:
        self._log.info(
            "nia.sources.waiting",
            count=count,
            max_wait_seconds=max_wait_seconds,
            poll_interval_seconds=poll_interval_seconds,
        )

    def source_ready(self, display_name: str) -> None:
        self._log.info("nia.source.ready", display_name=display_name)

    def source_failed(self, display_name: str, reason: str) -> None:
        self._log.warning("nia.source.failed", display_name=display_name, reason=reason)

    def setup_finished(
        self,
        cached: int,
        indexed: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "nia.setup.finished",
            cached=cached,
            indexed=indexed,
            failed=failed,
            elapsed_seconds=round(elapsed_seconds, 1),
        )
