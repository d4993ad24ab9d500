"""BenchmarkRunner — orchestrates the full benchmark loop."""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from lib_bench.config.domain.config import BenchConfig
from lib_bench.evaluation.domain.cancellation import CancellationToken
from lib_bench.evaluation.domain.evaluator import AgentMeta, Evaluator, EvaluatorConfig
from lib_bench.evaluation.domain.metadata import RunMetadata, RunStatus
from lib_bench.evaluation.domain.observer import EvaluationObserver
from lib_bench.evaluation.domain.progress import ProgressTracker
from lib_bench.evaluation.domain.semaphore import AsyncSemaphore
from lib_bench.evaluation.domain.summary import RunSummary
from lib_bench.execution.domain.executor import Executor
from lib_bench.execution.domain.result import ExecutionResult
from lib_bench.scheduling.domain.queue import generate_work_queue, shuffle
from lib_bench.scheduling.domain.rng import seeded_random
from lib_bench.scheduling.domain.work_item import WorkItem
from lib_bench.storage.domain.store import ResultStore
from lib_bench.task.domain.task import Task


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds")


@dataclass
class _RunState:
    """Mutable bookkeeping shared by every item task of one run."""

    run_dir: Path
    metadata: RunMetadata
    tracker: ProgressTracker
    semaphore: AsyncSemaphore
    progress_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    metadata_lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    failed: int = 0
    skipped: int = 0


class BenchmarkRunner:
    """Runs every (task, condition, repetition) WorkItem of a benchmark.

    The runner is free of infrastructure dependencies: execution, evaluation
    and persistence arrive as ports so that tests can swap them for fakes.

    All item tasks are created up front and throttled by a FIFO semaphore.
    A failure in one item is reported and never affects its siblings. The
    cancellation token only stops items that have not yet been admitted;
    admitted items run to completion.
    """

    def __init__(
        self,
        config: BenchConfig,
        tasks: list[Task],
        executor: Executor,
        evaluator: Evaluator,
        store: ResultStore,
        observer: EvaluationObserver,
        seed: int,
        cancellation: CancellationToken | None = None,
        evaluator_config: EvaluatorConfig | None = None,
        agent_version: str = "unknown",
        cli_args: list[str] | None = None,
    ) -> None:
        self._config = config
        self._tasks = tasks
        self._tasks_by_id = {task.id: task for task in tasks}
        self._executor = executor
        self._evaluator = evaluator
        self._store = store
        self._observer = observer
        self._seed = seed
        self._token = cancellation or CancellationToken()
        self._evaluator_config = evaluator_config or EvaluatorConfig()
        self._agent_version = agent_version
        self._cli_args = cli_args or []

    def plan(self) -> list[WorkItem]:
        """Return the seeded, shuffled work list. Touches nothing on disk."""
        task_ids = list(dict.fromkeys(task.id for task in self._tasks))
        queue = generate_work_queue(
            task_ids=task_ids,
            conditions=list(self._config.conditions),
            repetitions=self._config.execution.num_repetitions,
        )
        return shuffle(queue, seeded_random(self._seed))

    async def run(self) -> RunSummary:
        """Execute every planned WorkItem and return a RunSummary.

        Run metadata is written at start (``running``), when the cancellation
        token fires (``interrupted``), and always once more at the end.
        """
        queue = self.plan()
        execution = self._config.execution
        run_dir = await self._store.create_run_root()
        state = _RunState(
            run_dir=run_dir,
            metadata=RunMetadata(
                start_time=_now_iso(),
                total_tasks=len(self._tasks_by_id),
                conditions=list(self._config.conditions),
                repetitions=execution.num_repetitions,
                max_concurrent=execution.max_concurrent,
                max_attempts=execution.retry.max_attempts,
                seed=self._seed,
                model=self._config.agent.model,
                agent_version=self._agent_version,
                cli_args=self._cli_args,
                total_items=len(queue),
            ),
            tracker=ProgressTracker(total=len(queue)),
            semaphore=AsyncSemaphore(execution.max_concurrent),
        )
        await self._store.write_run_metadata(run_dir, state.metadata)

        self._observer.run_started(
            run_dir=str(run_dir),
            total_items=len(queue),
            total_tasks=len(self._tasks_by_id),
            condition_names=list(self._config.conditions),
            num_repetitions=execution.num_repetitions,
            max_concurrent=execution.max_concurrent,
            seed=self._seed,
        )
        started_at = time.monotonic()

        watcher = asyncio.create_task(self._record_interruption(state=state))
        try:
            async with asyncio.TaskGroup() as tg:
                for item in queue:
                    tg.create_task(self._run_item(item=item, state=state))
        finally:
            # A fired token means the watcher is (or will be) writing metadata;
            # let it finish so the final write below cannot race it.
            if not self._token.cancelled:
                watcher.cancel()
            await asyncio.gather(watcher, return_exceptions=True)

        status: RunStatus = "interrupted" if self._token.cancelled else "completed"
        await self._update_metadata(state=state, status=status)

        self._observer.run_completed(
            run_dir=str(run_dir),
            status=status,
            completed=state.tracker.completed,
            failed=state.failed,
            skipped=state.skipped,
            total=len(queue),
            elapsed_seconds=time.monotonic() - started_at,
        )
        return RunSummary(
            run_dir=run_dir,
            status=status,
            completed_items=state.tracker.completed,
            failed_items=state.failed,
            skipped_items=state.skipped,
            total_items=len(queue),
        )

    async def _record_interruption(self, state: _RunState) -> None:
        await self._token.wait()
        self._observer.run_interrupted(
            run_dir=str(state.run_dir),
            completed=state.tracker.completed,
            total=state.tracker.total,
        )
        await self._update_metadata(state=state, status="interrupted")

    async def _update_metadata(self, state: _RunState, status: RunStatus) -> None:
        async with state.metadata_lock:
            state.metadata = state.metadata.model_copy(
                update={
                    "status": status,
                    "end_time": _now_iso(),
                    "completed_items": state.tracker.completed,
                }
            )
            await self._store.write_run_metadata(state.run_dir, state.metadata)

    async def _run_item(self, item: WorkItem, state: _RunState) -> None:
        """Admit one item through the semaphore, then process it.

        The token is checked before waiting for a permit and again once the
        permit is granted, since cancellation may land while queued.
        """
        if self._token.cancelled:
            self._skip(item=item, state=state)
            return

        async with state.semaphore:
            if self._token.cancelled:
                self._skip(item=item, state=state)
                return
            try:
                await self._process_item(item=item, state=state)
            except Exception as exc:  # noqa: BLE001
                state.failed += 1
                self._observer.item_failed(
                    task_id=item.task_id,
                    condition=item.condition,
                    repetition_index=item.repetition_index,
                    reason=str(exc) or type(exc).__name__,
                )

    def _skip(self, item: WorkItem, state: _RunState) -> None:
        state.skipped += 1
        self._observer.item_skipped(
            task_id=item.task_id,
            condition=item.condition,
            repetition_index=item.repetition_index,
        )

    async def _process_item(self, item: WorkItem, state: _RunState) -> None:
        task = self._tasks_by_id[item.task_id]
        started_at = time.monotonic()
        self._observer.item_started(
            task_id=item.task_id,
            condition=item.condition,
            repetition_index=item.repetition_index,
        )

        execution = await self._executor.execute(
            task=task,
            condition=item.condition,
            repetition_index=item.repetition_index,
        )
        try:
            self._report_execution_problems(item=item, execution=execution)
            evaluation = await self._evaluator.evaluate(
                task=task,
                extracted_files=execution.extracted_files,
                condition=item.condition,
                repetition_index=item.repetition_index,
                config=self._evaluator_config,
                agent_meta=AgentMeta.from_execution(execution),
            )
            await self._store.store_artifacts(state.run_dir, execution)
            result_path = await self._store.store_result(state.run_dir, evaluation)
        finally:
            await self._executor.cleanup(execution)

        duration_ms = int((time.monotonic() - started_at) * 1000)
        async with state.progress_lock:
            snapshot = state.tracker.record(duration_ms)
            self._observer.item_completed(
                task_id=item.task_id,
                condition=item.condition,
                repetition_index=item.repetition_index,
                result_path=str(result_path),
                completed=snapshot.completed,
                total=snapshot.total,
                elapsed_ms=snapshot.elapsed_ms,
                eta_ms=snapshot.eta_ms,
            )

    def _report_execution_problems(
        self,
        item: WorkItem,
        execution: ExecutionResult,
    ) -> None:
        if execution.error is not None:
            self._observer.item_agent_error(
                task_id=item.task_id,
                condition=item.condition,
                repetition_index=item.repetition_index,
                error_name=execution.error.name,
                error_message=execution.error.message,
            )
        elif not execution.extracted_files and execution.exit_code == 0:
            self._observer.item_no_code_extracted(
                task_id=item.task_id,
                condition=item.condition,
                repetition_index=item.repetition_index,
            )
