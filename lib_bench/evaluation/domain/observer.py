"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class EvaluationObserver(Protocol):
    """Observer port emitting structured events during a benchmark run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def run_started(
        self,
        run_dir: str,
        total_items: int,
        total_tasks: int,
        condition_names: list[str],
        num_repetitions: int,
        max_concurrent: int,
        seed: int,
    ) -> None: ...

    def run_interrupted(self, run_dir: str, completed: int, total: int) -> None: ...

    def run_completed(
        self,
        run_dir: str,
        status: str,
        completed: int,
        failed: int,
        skipped: int,
        total: int,
        elapsed_seconds: float,
    ) -> None: ...

    def item_started(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None: ...

    def item_agent_error(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        error_name: str,
        error_message: str,
    ) -> None: ...

    def item_no_code_extracted(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None: ...

    def item_completed(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        result_path: str,
        completed: int,
        total: int,
        elapsed_ms: int,
        eta_ms: int | None,
    ) -> None: ...

    def item_failed(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        reason: str,
    ) -> None: ...

    def item_skipped(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None: ...
