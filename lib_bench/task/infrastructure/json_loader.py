"""JSON task loader — reads one task per file from the category subdirectories."""

import json
from pathlib import Path

from pydantic import ValidationError

from lib_bench.config.domain.tasks import TasksConfig
from lib_bench.task.domain.load_result import TaskLoadIssue, TaskLoadResult
from lib_bench.task.domain.observer import TaskObserver
from lib_bench.task.domain.task import CATEGORIES, Task
from lib_bench.task.infrastructure.errors import TaskLoadError


class JsonTaskLoader:
    """Loads ``<tasks>/<category>/*.json`` files into validated Task objects."""

    def __init__(self, observer: TaskObserver) -> None:
        self._observer = observer

    def load(self, config: TasksConfig) -> TaskLoadResult:
        """
        Load every task file, then apply the category, library and id filters.

        Invalid files are collected as issues and reported to the observer;
        they never abort loading.

        Raises:
            TaskLoadError: if the tasks directory does not exist.
        """
        path_str = str(config.path)
        self._observer.task_loading_started(path=path_str)

        if not config.path.is_dir():
            reason = f"directory not found: {path_str}"
            self._observer.task_loading_failed(path=path_str, reason=reason)
            raise TaskLoadError(reason=reason)

        tasks: list[Task] = []
        issues: list[TaskLoadIssue] = []
        for category in CATEGORIES:
            for file_path in _task_files(config.path / category):
                result = _parse_file(path=file_path)
                if isinstance(result, TaskLoadIssue):
                    self._observer.task_file_invalid(
                        path=result.path, reason=result.reason
                    )
                    issues.append(result)
                else:
                    tasks.append(result)

        selected = [task for task in tasks if _matches(task=task, config=config)]
        self._observer.task_loading_completed(
            path=path_str,
            total_loaded=len(tasks),
            total_selected=len(selected),
        )
        return TaskLoadResult(tasks=selected, issues=issues)


def _task_files(directory: Path) -> list[Path]:
    # A missing category directory simply contributes no tasks.
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix == ".json")


def _parse_file(path: Path) -> Task | TaskLoadIssue:
    """Parse one task file, returning an issue instead of raising."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        return TaskLoadIssue(path=str(path), reason=f"invalid JSON: {exc}")

    try:
        return Task.model_validate(data)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return TaskLoadIssue(path=str(path), reason=f"validation failed: {details}")


def _matches(task: Task, config: TasksConfig) -> bool:
    if config.category is not None and task.category != config.category:
        return False
    if config.library is not None and task.library != config.library:
        return False
    if config.task_id is not None and task.id != config.task_id:
        return False
    return True
