"""Execution configuration models."""

from pathlib import Path

from pydantic import BaseModel, Field


class RetryConfig(BaseModel, frozen=True):
    max_attempts: int = Field(default=3, ge=1)


class ExecutionConfig(BaseModel, frozen=True):
    num_repetitions: int = Field(default=3, ge=1)
    max_concurrent: int = Field(default=1, ge=1)
    timeout_seconds: float = Field(default=300.0, gt=0)
    seed: int | None = None
    keep_workdirs: bool = False
    temp_base_dir: Path = Path("/tmp/lib-bench")
    retry: RetryConfig = RetryConfig()
