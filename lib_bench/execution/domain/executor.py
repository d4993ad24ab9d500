"""Executor port — turns one WorkItem into one terminal ExecutionResult."""

from typing import Protocol

from lib_bench.execution.domain.result import ExecutionResult
from lib_bench.task.domain.task import Task


class Executor(Protocol):
    async def execute(
        self,
        task: Task,
        condition: str,
        repetition_index: int,
    ) -> ExecutionResult:
        """Run the agent, retrying failed attempts. Failures are returned, not raised."""
        ...

    async def cleanup(self, result: ExecutionResult) -> None:
        """Remove the surviving attempt's directories, unless they are being kept."""
        ...
