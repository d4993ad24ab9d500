"""Structlog implementation of the TaskObserver port."""

import structlog


class StructlogTaskObserver:
    """Delegates task domain events to structlog.

    Satisfies the TaskObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def task_loading_started(self, path: str) -> None:
        self._log.info("task.loading.started", path=path)

    def task_file_invalid(self, path: str, reason: str) -> None:
        self._log.warning("task.file.invalid", path=path, reason=reason)

    def task_loading_completed(
        self,
        path: str,
        total_loaded: int,
        total_selected: int,
    ) -> None:
        self._log.info(
            "task.loading.completed",
            path=path,
            total_loaded=total_loaded,
            total_selected=total_selected,
        )

    def task_loading_failed(self, path: str, reason: str) -> None:
        self._log.error("task.loading.failed", path=path, reason=reason)
