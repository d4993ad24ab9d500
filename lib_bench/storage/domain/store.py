"""ResultStore port — durable, atomic persistence of a run's outputs."""

from pathlib import Path
from typing import Protocol

from lib_bench.evaluation.domain.metadata import RunMetadata
from lib_bench.evaluation.domain.result import EvaluationResult
from lib_bench.execution.domain.result import ExecutionResult


class ResultStore(Protocol):
    async def create_run_root(self) -> Path: ...

    async def store_result(self, run_dir: Path, result: EvaluationResult) -> Path: ...

    async def store_artifacts(
        self,
        run_dir: Path,
        execution: ExecutionResult,
    ) -> list[Path]: ...

    async def write_run_metadata(
        self,
        run_dir: Path,
        metadata: RunMetadata,
    ) -> Path: ...
