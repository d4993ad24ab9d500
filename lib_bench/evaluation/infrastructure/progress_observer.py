"""ProgressEvaluationObserver — renders live per-condition Rich progress bars to stderr."""

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from lib_bench.evaluation.domain.progress import format_duration

_OVERALL = "Overall"

_CONDITION_COLORS: list[str] = ["cyan", "green", "yellow", "magenta", "blue"]


class _SegmentedBarColumn(ProgressColumn):
    """Bar with three segments: done, in-flight, and not yet started."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        total = task.total or 0
        done_cells = inflight_cells = 0
        if total > 0:
            done_cells = int(task.completed / total * self.bar_width)
            inflight = int(task.fields.get("inflight", 0))
            inflight_cells = min(
                int(inflight / total * self.bar_width),
                self.bar_width - done_cells,
            )
        rest = self.bar_width - done_cells - inflight_cells

        bar = Text()
        bar.append("█" * done_cells, style="bright_green")
        bar.append("▒" * inflight_cells, style="grey50")
        bar.append("░" * rest, style="dim white")
        return bar


class _CountsColumn(ProgressColumn):
    """Renders ``done+inflight/total``, plus a red failure count when non-zero."""

    def render(self, task: Task) -> Text:
        text = Text.assemble(
            (str(int(task.completed)), "bright_green"),
            ("+", "dim white"),
            (str(int(task.fields.get("inflight", 0))), "grey50"),
            ("/", "dim white"),
            (str(int(task.total or 0)), "default"),
        )
        failed = int(task.fields.get("failed", 0))
        if failed:
            text.append(f" ✗{failed}", style="red")
        return text


class ProgressEvaluationObserver:
    """Live progress display: one Overall row plus one row per condition.

    The Overall row shows the runner's own rolling-window ETA; condition rows
    show elapsed time only.

    Pass ``disabled=True`` to keep the counters without any terminal output
    (useful in tests).

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False, console: Console | None = None) -> None:
        self._disabled = disabled
        self._console = console
        self._done: dict[str, int] = {}
        self._inflight: dict[str, int] = {}
        self._failed: dict[str, int] = {}
        self._total: dict[str, int] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._progress: Progress | None = None
        self._live: Live | None = None

    def done(self, key: str) -> int:
        return self._done.get(key, 0)

    def inflight(self, key: str) -> int:
        return self._inflight.get(key, 0)

    def failed(self, key: str) -> int:
        return self._failed.get(key, 0)

    def total(self, key: str) -> int:
        return self._total.get(key, 0)

    def _bump(self, condition: str, done: int = 0, inflight: int = 0) -> None:
        for key in (condition, _OVERALL):
            if key not in self._done:
                continue
            self._done[key] += done
            self._inflight[key] = max(0, self._inflight[key] + inflight)
            self._push(key=key)

    def _push(self, key: str, **fields: str) -> None:
        if self._progress is None or key not in self._task_ids:
            return
        self._progress.update(
            self._task_ids[key],
            completed=self._done[key],
            inflight=self._inflight[key],
            failed=self._failed[key],
            **fields,
        )

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
        keys = [_OVERALL, *condition_names]
        per_condition = total_tasks * num_repetitions
        self._total = {name: per_condition for name in condition_names}
        self._total[_OVERALL] = total_items
        self._done = dict.fromkeys(keys, 0)
        self._inflight = dict.fromkeys(keys, 0)
        self._failed = dict.fromkeys(keys, 0)
        self._task_ids = {}

        if self._disabled:
            return

        console = self._console or Console(stderr=True)
        pad = max(len(key) for key in keys)
        self._progress = Progress(
            TextColumn("{task.description}"),
            _SegmentedBarColumn(bar_width=40),
            _CountsColumn(),
            TimeElapsedColumn(),
            TextColumn("{task.fields[eta]}", style="dim"),
            console=console,
        )
        for index, key in enumerate(keys):
            if key == _OVERALL:
                description = f"[bold]{key:<{pad}}[/bold]"
            else:
                color = _CONDITION_COLORS[(index - 1) % len(_CONDITION_COLORS)]
                description = f"[{color}]{key:<{pad}}[/{color}]"
            self._task_ids[key] = self._progress.add_task(
                description=description,
                total=float(self._total[key]),
                inflight=0,
                failed=0,
                eta="",
            )

        legend = Text.assemble(
            "  ",
            ("█", "bright_green"),
            " done  ",
            ("▒", "grey50"),
            " in-flight  ",
            ("░", "dim white"),
            " pending",
        )
        self._live = Live(Group(self._progress, legend), console=console)
        self._live.start()

    def run_interrupted(self, run_dir: str, completed: int, total: int) -> None:
        self._push(key=_OVERALL, eta="interrupted")

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
        if self._live is not None:
            self._live.stop()
        self._live = None
        self._progress = None

    def item_started(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        self._bump(condition=condition, inflight=1)

    def item_agent_error(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        error_name: str,
        error_message: str,
    ) -> None:
        pass

    def item_no_code_extracted(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        pass

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
        self._bump(condition=condition, done=1, inflight=-1)
        if eta_ms is not None and _OVERALL in self._done:
            self._push(key=_OVERALL, eta=f"eta {format_duration(eta_ms)}")

    def item_failed(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        reason: str,
    ) -> None:
        for key in (condition, _OVERALL):
            if key in self._failed:
                self._failed[key] += 1
        self._bump(condition=condition, done=1, inflight=-1)

    def item_skipped(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
    ) -> None:
        pass
