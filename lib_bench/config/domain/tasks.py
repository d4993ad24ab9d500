"""Task selection configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

from lib_bench.task.domain.task import Category


class TasksConfig(BaseModel, frozen=True):
    path: Path
    category: Category | None = None
    library: str | None = None
    task_id: str | None = None
    limit: int | None = Field(default=None, ge=1)
