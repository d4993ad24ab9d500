"""TaskLoader port."""

from typing import Protocol

from lib_bench.config.domain.tasks import TasksConfig
from lib_bench.task.domain.load_result import TaskLoadResult


class TaskLoader(Protocol):
    def load(self, config: TasksConfig) -> TaskLoadResult: ...
