"""CompositeEvaluationObserver — fans out all events to a list of observers."""

from lib_bench.evaluation.domain.observer import EvaluationObserver


class CompositeEvaluationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[EvaluationObserver]) -> None:
        self._observers = observers

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
        for obs in self._observers:
            obs.run_started(
                run_dir=run_dir,
                total_items=total_items,
                total_tasks=total_tasks,
                condition_names=condition_names,
                num_repetitions=num_repetitions,
                max_concurrent=max_concurrent,
                seed=seed,
            )

    def run_interrupted(self, run_dir: str, completed: int, total: int) -> None:
        for obs in self._observers:
            obs.run_interrupted(run_dir=run_dir, completed=completed, total=total)

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
        for obs in self._observers:
            obs.run_completed(
                run_dir=run_dir,
                status=status,
                completed=completed,
                failed=failed,
                skipped=skipped,
                total=total,
                elapsed_seconds=elapsed_seconds,
            )

    def item_started(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        for obs in self._observers:
            obs.item_started(
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
        for obs in self._observers:
            obs.item_agent_error(
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
        for obs in self._observers:
            obs.item_no_code_extracted(
                task_id=task_id,
                condition=condition,
                repetition_index=repetition_index,
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
        for obs in self._observers:
            obs.item_completed(
                task_id=task_id,
                condition=condition,
                repetition_index=repetition_index,
                result_path=result_path,
                completed=completed,
                total=total,
                elapsed_ms=elapsed_ms,
                eta_ms=eta_ms,
            )

    def item_failed(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        reason: str,
    ) -> None:
        for obs in self._observers:
            obs.item_failed(
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
        for obs in self._observers:
            obs.item_skipped(
                task_id=task_id,
                condition=condition,
                repetition_index=repetition_index,
            )
