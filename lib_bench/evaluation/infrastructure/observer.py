"""StructlogEvaluationObserver — production observer that delegates to structlog."""

import structlog

from lib_bench.evaluation.domain.progress import format_duration


class StructlogEvaluationObserver:
    """Logs evaluation domain events to structlog.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(
        self,
        run_dir: str,
        total_items: int,
        total_tasks: int,
        condition_names: list[str],
        num_repetitions: int,
        max_concurrent: int,
        seed: int,
    ) -> None:
        self._log.info(
            "evaluation.run.started",
            run_dir=run_dir,
            total_items=total_items,
            total_tasks=total_tasks,
            condition_names=condition_names,
            num_repetitions=num_repetitions,
            max_concurrent=max_concurrent,
            seed=seed,
        )

    def run_interrupted(self, run_dir: str, completed: int, total: int) -> None:
        self._log.warning(
            "evaluation.run.interrupted",
            run_dir=run_dir,
            completed=completed,
            total=total,
            message="Waiting for in-flight items to complete",
        )

    def run_completed(
        self,
        run_dir: str,
        status: str,
        completed: int,
        failed: int,
        skipped: int,
        total: int,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "evaluation.run.completed",
            run_dir=run_dir,
            status=status,
            completed=completed,
            failed=failed,
            skipped=skipped,
            total=total,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def item_started(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        self._log.debug(
            "evaluation.item.started",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
        )

    def item_agent_error(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        error_name: str,
        error_message: str,
    ) -> None:
        self._log.warning(
            "evaluation.item.agent_error",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            error_name=error_name,
            error_message=error_message,
        )

    def item_no_code_extracted(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        self._log.warning(
            "evaluation.item.no_code_extracted",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            message="Agent exited cleanly but produced no code files",
        )

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
    ) -> None:
        self._log.info(
            "evaluation.item.completed",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            result_path=result_path,
            progress=f"{completed}/{total}",
            elapsed=format_duration(elapsed_ms),
            eta=format_duration(eta_ms) if eta_ms is not None else "calculating",
        )

    def item_failed(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        reason: str,
    ) -> None:
        self._log.error(
            "evaluation.item.failed",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            reason=reason,
        )

    def item_skipped(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        self._log.info(
            "evaluation.item.skipped",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
        )
