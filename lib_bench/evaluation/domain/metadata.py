"""RunMetadata — the single mutable record describing a run, persisted as run-meta.json."""

from typing import Literal

from pydantic import BaseModel, Field

type RunStatus = Literal["running", "completed", "interrupted"]


class RunMetadata(BaseModel, frozen=True):
    """Configuration echo plus progress of one run.

    Frozen like every value object here; updates produce a new instance via
    ``model_copy``.
    """

    start_time: str
    end_time: str | None = None
    total_tasks: int = Field(ge=0)
    conditions: list[str]
    repetitions: int = Field(ge=1)
    max_concurrent: int = Field(ge=1)
    max_attempts: int = Field(ge=1)
    seed: int
    model: str
    agent_version: str
    cli_args: list[str] = Field(default_factory=list)
    status: RunStatus = "running"
    completed_items: int = Field(default=0, ge=0)
    total_items: int = Field(ge=0)
