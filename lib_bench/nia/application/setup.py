"""NiaSetup — gets every Nia source a task set needs indexed before the run."""

import asyncio
import time

from lib_bench.config.domain.nia import NiaConfig
from lib_bench.evaluation.domain.semaphore import AsyncSemaphore
from lib_bench.nia.domain.client import NiaClient
from lib_bench.nia.domain.observer import NiaObserver
from lib_bench.nia.domain.source import (
    NiaSetupReport,
    SubmittedSource,
    is_pending,
    is_ready,
)
from lib_bench.nia.domain.target import NiaTarget, targets_for_tasks
from lib_bench.task.domain.task import Task


class _IndexingStopped(Exception):
    """A source stopped short of ready; carries the reason for the observer."""


class NiaSetup:
    """Submits the targets for a task set and waits for them to be indexed.

    Submissions run at most ``config.parallel`` at a time. Sources already
    indexed are reported as cached; the rest are polled until ready, until
    they reach a status that is neither ready nor pending, or until
    ``config.max_wait_seconds`` has passed for the whole phase. Failures
    are reported and never abort the setup; the run goes ahead with what
    is indexed.
    """

    def __init__(
        self,
        client: NiaClient,
        observer: NiaObserver,
        config: NiaConfig,
    ) -> None:
        self._client = client
        self._observer = observer
        self._config = config

    async def run(self, tasks: list[Task]) -> NiaSetupReport:
        started_at = time.monotonic()
        selection = targets_for_tasks(tasks)
        if selection.unmapped:
            self._observer.targets_unmapped(keys=selection.unmapped)
        if not selection.targets:
            self._observer.no_targets()
            return NiaSetupReport(cached=[], indexed=[], failed=[], elapsed_seconds=0.0)

        self._observer.submitting(count=len(selection.targets))
        submitted = await self._submit_all(selection.targets)
        failed = [
            target.display_name
            for target, source in zip(selection.targets, submitted, strict=True)
            if source is None
        ]

        cached: list[str] = []
        pending: list[SubmittedSource] = []
        for source in submitted:
            if source is None:
                continue
            name = source.target.display_name
            if is_ready(source.status):
                cached.append(name)
                self._observer.source_cached(display_name=name, status=source.status)
            else:
                pending.append(source)
                self._observer.source_pending(display_name=name, status=source.status)

        indexed: list[str] = []
        if pending:
            self._observer.waiting(
                count=len(pending),
                max_wait_seconds=self._config.max_wait_seconds,
                poll_interval_seconds=self._config.poll_interval_seconds,
            )
            deadline = time.monotonic() + self._config.max_wait_seconds
            outcomes = await asyncio.gather(
                *(self._wait_for(source, deadline) for source in pending)
            )
            for source, ready in zip(pending, outcomes, strict=True):
                bucket = indexed if ready else failed
                bucket.append(source.target.display_name)

        elapsed = time.monotonic() - started_at
        self._observer.setup_finished(
            cached=len(cached),
            indexed=len(indexed),
            failed=len(failed),
            elapsed_seconds=elapsed,
        )
        return NiaSetupReport(
            cached=cached, indexed=indexed, failed=failed, elapsed_seconds=elapsed
        )

    async def _submit_all(
        self, targets: list[NiaTarget]
    ) -> list[SubmittedSource | None]:
        semaphore = AsyncSemaphore(self._config.parallel)

        async def submit(target: NiaTarget) -> SubmittedSource | None:
            async with semaphore:
                try:
                    return await self._client.submit(target)
                except Exception as exc:  # noqa: BLE001
                    self._observer.submit_failed(
                        display_name=target.display_name, reason=str(exc)
                    )
                    return None

        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(submit(target)) for target in targets]
        return [task.result() for task in tasks]

    async def _wait_for(self, source: SubmittedSource, deadline: float) -> bool:
        name = source.target.display_name
        try:
            await self._poll_until_ready(source.source_id, deadline)
        except _IndexingStopped as exc:
            self._observer.source_failed(display_name=name, reason=str(exc))
            return False
        self._observer.source_ready(display_name=name)
        return True

    async def _poll_until_ready(self, source_id: str, deadline: float) -> None:
        """
        Raises:
            _IndexingStopped: on a terminal non-ready status, or at the deadline.
        """
        while time.monotonic() < deadline:
            status = await self._client.status(source_id)
            if is_ready(status):
                return
            if not is_pending(status):
                raise _IndexingStopped(f'indexing ended with status "{status}"')
            wait = min(self._config.poll_interval_seconds, deadline - time.monotonic())
            if wait <= 0:
                break
            await asyncio.sleep(wait)
        raise _IndexingStopped("timed out waiting for indexing to complete")
