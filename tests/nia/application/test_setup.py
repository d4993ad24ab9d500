"""Tests for NiaSetup: submission, caching, polling and the overall deadline."""

import time

from lib_bench.config.domain.nia import NiaConfig
from lib_bench.nia.application.setup import NiaSetup
from lib_bench.task.domain.task import Task
from tests.nia.fake_client import FakeNiaClient
from tests.nia.fake_observer import FakeNiaObserver
from tests.task.task_factory import make_task

_ZOD_TASKS = [make_task(task_id="z", library="zod", target_version="4.0.0")]


def _config(
    max_wait_seconds: float = 5.0,
    poll_interval_seconds: float = 0.01,
    parallel: int = 3,
) -> NiaConfig:
    return NiaConfig(
        max_wait_seconds=max_wait_seconds,
        poll_interval_seconds=poll_interval_seconds,
        parallel=parallel,
    )


class _Setup:
    def __init__(self, client: FakeNiaClient, config: NiaConfig | None = None) -> None:
        self.client = client
        self.observer = FakeNiaObserver()
        self.setup = NiaSetup(
            client=client, observer=self.observer, config=config or _config()
        )


class TestNoTargets:
    async def test_unmapped_tasks_skip_the_api(self) -> None:
        s = _Setup(FakeNiaClient(initial={}))

        report = await s.setup.run([make_task(library="svelte", target_version="5.0")])

        assert report.cached == report.indexed == report.failed == []
        assert s.observer.unmapped == [["svelte:5"]]
        assert s.observer.no_targets_count == 1
        assert s.client.submitted == []


class TestCachedSources:
    async def test_ready_on_submit_is_not_polled(self) -> None:
        client = FakeNiaClient(initial={"Zod v4": "indexed", "Zod Docs": "completed"})
        s = _Setup(client)

        report = await s.setup.run(_ZOD_TASKS)

        assert report.cached == ["Zod v4", "Zod Docs"]
        assert report.indexed == []
        assert client.polled == []
        assert s.observer.waits == []
        assert s.observer.finished[0]["cached"] == 2


class TestPolling:
    async def test_pending_source_is_polled_until_ready(self) -> None:
        client = FakeNiaClient(
            initial={"Zod v4": "queued", "Zod Docs": "completed"},
            statuses={"src-Zod v4": ["indexing", "processing", "indexed"]},
        )
        s = _Setup(client)

        report = await s.setup.run(_ZOD_TASKS)

        assert report.indexed == ["Zod v4"]
        assert report.cached == ["Zod Docs"]
        assert client.polled == ["src-Zod v4"] * 3
        assert s.observer.pending == [{"display_name": "Zod v4", "status": "queued"}]
        assert s.observer.ready == ["Zod v4"]
        assert s.observer.waits[0]["count"] == 1

    async def test_terminal_status_fails_the_source(self) -> None:
        client = FakeNiaClient(
            initial={"Zod v4": "indexing", "Zod Docs": "indexing"},
            statuses={"src-Zod v4": ["failed"], "src-Zod Docs": ["completed"]},
        )
        s = _Setup(client)

        report = await s.setup.run(_ZOD_TASKS)

        assert report.failed == ["Zod v4"]
        assert report.indexed == ["Zod Docs"]
        assert s.observer.failures == [
            {"display_name": "Zod v4", "reason": 'indexing ended with status "failed"'}
        ]

    async def test_error_status_while_polling_fails_the_source(self) -> None:
        client = FakeNiaClient(
            initial={"Zod v4": "indexing", "Zod Docs": "completed"},
            statuses={"src-Zod v4": ["error"]},
        )
        s = _Setup(client)

        report = await s.setup.run(_ZOD_TASKS)

        assert report.failed == ["Zod v4"]

    async def test_overall_deadline_bounds_the_wait(self) -> None:
        client = FakeNiaClient(
            initial={"Zod v4": "indexing", "Zod Docs": "indexing"},
            statuses={"src-Zod v4": ["indexing"], "src-Zod Docs": ["indexing"]},
        )
        s = _Setup(client, _config(max_wait_seconds=0.1, poll_interval_seconds=0.02))

        started = time.monotonic()
        report = await s.setup.run(_ZOD_TASKS)

        assert time.monotonic() - started < 2.0
        assert sorted(report.failed) == ["Zod Docs", "Zod v4"]
        assert all("timed out" in f["reason"] for f in s.observer.failures)


class TestSubmitFailures:
    async def test_failed_submit_does_not_stop_other_targets(self) -> None:
        client = FakeNiaClient(
            initial={"Zod v4": RuntimeError("502 bad gateway"), "Zod Docs": "indexed"}
        )
        s = _Setup(client)

        report = await s.setup.run(_ZOD_TASKS)

        assert report.failed == ["Zod v4"]
        assert report.cached == ["Zod Docs"]
        assert s.observer.submit_failures == [
            {"display_name": "Zod v4", "reason": "502 bad gateway"}
        ]
        assert s.observer.finished[0]["failed"] == 1


class TestConcurrency:
    def _many_tasks(self) -> list[Task]:
        versions = [("react", "19.0.0"), ("next", "15.0.0"), ("zod", "3.0.0")]
        return [
            make_task(task_id=f"t{i}", library=library, target_version=version)
            for i, (library, version) in enumerate(versions)
        ]

    async def test_submissions_respect_parallel_limit(self) -> None:
        names = ["React v19", "React Docs", "Next.js v15", "Next.js Docs"]
        names += ["Zod v3", "Zod Docs"]
        client = FakeNiaClient(
            initial=dict.fromkeys(names, "indexed"), submit_delay=0.01
        )
        s = _Setup(client, _config(parallel=2))

        report = await s.setup.run(self._many_tasks())

        assert client.max_in_flight == 2
        assert sorted(report.cached) == sorted(names)
        assert s.observer.submitting_counts == [6]
