"""Observer port for the execution domain — defines events in domain language."""

from typing import Protocol


class ExecutionObserver(Protocol):
    def attempt_started(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempt: int,
        max_attempts: int,
    ) -> None: ...

    def attempt_timed_out(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempt: int,
        timeout_seconds: float,
    ) -> None: ...

    def attempt_retry(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempt: int,
        max_attempts: int,
        exit_code: int,
    ) -> None: ...

    def execution_succeeded(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempts: int,
        duration_ms: int,
    ) -> None: ...

    def execution_exhausted(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempts: int,
        exit_code: int,
        reason: str,
    ) -> None: ...

    def spawn_failed(self, binary: str, reason: str) -> None: ...

    def config_template_malformed(self, path: str, reason: str) -> None: ...

    def cleanup_failed(self, path: str, reason: str) -> None: ...
