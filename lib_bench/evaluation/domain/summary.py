"""RunSummary — what a finished (or interrupted) run reports back to its caller."""

from pathlib import Path

from pydantic import BaseModel

from lib_bench.evaluation.domain.metadata import RunStatus


class RunSummary(BaseModel, frozen=True):
    run_dir: Path
    status: RunStatus
    completed_items: int
    failed_items: int
    skipped_items: int
    total_items: int
