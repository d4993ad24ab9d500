"""JsonResultStore — writes results, artifacts and run metadata as JSON files.

Layout under a run root:

    run-meta.json
    {task_id}/{condition}/run-{rep}.json
    {task_id}/{condition}/transcript-{rep}.ndjson
    {task_id}/{condition}/tool-calls-{rep}.json

Every file is written to a ``.tmp`` sibling first and renamed into place, so a
reader never observes a partially written file.
"""

import asyncio
import json
import os
from datetime import UTC, datetime
from pathlib import Path

from lib_bench.evaluation.domain.metadata import RunMetadata
from lib_bench.evaluation.domain.result import EvaluationResult
from lib_bench.execution.domain.result import ExecutionResult

RUN_METADATA_FILENAME = "run-meta.json"


def run_root_name(now: datetime) -> str:
    """ISO-8601 UTC timestamp with ':' and '.' replaced, safe as a directory name."""
    stamp = now.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.")
    stamp += f"{now.microsecond // 1000:03d}Z"
    return stamp.replace(":", "-").replace(".", "-")


def write_atomic(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, path)
    return path


def result_path(
    run_dir: Path,
    task_id: str,
    condition: str,
    repetition_index: int,
) -> Path:
    return run_dir / task_id / condition / f"run-{repetition_index}.json"


class JsonResultStore:
    """Persists a run under ``output_dir/<timestamp>/``.

    Does NOT inherit from ResultStore (structural typing via Protocol).
    """

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    async def create_run_root(self) -> Path:
        run_dir = self._output_dir / run_root_name(datetime.now(UTC))
        await asyncio.to_thread(run_dir.mkdir, parents=True, exist_ok=True)
        return run_dir

    async def store_result(self, run_dir: Path, result: EvaluationResult) -> Path:
        path = result_path(
            run_dir=run_dir,
            task_id=result.task_id,
            condition=result.condition,
            repetition_index=result.repetition_index,
        )
        return await asyncio.to_thread(
            write_atomic, path, result.model_dump_json(indent=2)
        )

    async def store_artifacts(
        self,
        run_dir: Path,
        execution: ExecutionResult,
    ) -> list[Path]:
        item_dir = run_dir / execution.task_id / execution.condition
        rep = execution.repetition_index
        tool_calls = [call.model_dump(mode="json") for call in execution.tool_calls]
        transcript = await asyncio.to_thread(
            write_atomic,
            item_dir / f"transcript-{rep}.ndjson",
            execution.raw_output,
        )
        calls = await asyncio.to_thread(
            write_atomic,
            item_dir / f"tool-calls-{rep}.json",
            json.dumps(tool_calls, indent=2),
        )
        return [transcript, calls]

    async def write_run_metadata(
        self,
        run_dir: Path,
        metadata: RunMetadata,
    ) -> Path:
        return await asyncio.to_thread(
            write_atomic,
            run_dir / RUN_METADATA_FILENAME,
            metadata.model_dump_json(indent=2),
        )
