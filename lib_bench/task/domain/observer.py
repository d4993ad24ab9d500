"""Observer port for the task domain — defines events in domain language."""

from typing import Protocol


class TaskObserver(Protocol):
    def task_loading_started(self, path: str) -> None: ...

    def task_file_invalid(self, path: str, reason: str) -> None: ...

    def task_loading_completed(
        self,
        path: str,
        total_loaded: int,
        total_selected: int,
    ) -> None: ...

    def task_loading_failed(self, path: str, reason: str) -> None: ...
