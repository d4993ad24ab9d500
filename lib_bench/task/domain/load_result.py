"""TaskLoadResult — the tasks that loaded plus the files that did not."""

from pydantic import BaseModel

from lib_bench.task.domain.task import Task


class TaskLoadIssue(BaseModel, frozen=True):
    """A task file that was skipped, and why."""

    path: str
    reason: str


class TaskLoadResult(BaseModel, frozen=True):
    """Immutable value object returned by a TaskLoader.

    Invalid task files never abort loading; they are reported in ``issues``.
    """

    tasks: list[Task]
    issues: list[TaskLoadIssue]
