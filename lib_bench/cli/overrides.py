"""Command-line overrides applied on top of a loaded BenchConfig."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from lib_bench.config.domain.config import BenchConfig
from lib_bench.config.infrastructure.errors import (
    ConfigValidationError,
    UnknownConditionError,
)


class RunOverrides(BaseModel, frozen=True):
    """Flag values for one run. None means "keep the configured value"."""

    reps: int | None = None
    parallel: int | None = None
    conditions: list[str] | None = None
    timeout_seconds: float | None = None
    seed: int | None = None
    output_dir: Path | None = None
    model: str | None = None
    keep_workdirs: bool = False
    limit: int | None = None
    category: str | None = None
    library: str | None = None
    task_id: str | None = None
    tasks_dir: Path | None = None
    max_attempts: int | None = None


def _set(section: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        section[key] = value


def apply_overrides(config: BenchConfig, overrides: RunOverrides) -> BenchConfig:
    """
    Return a new BenchConfig with the overrides applied and re-validated.

    Raises:
        ConfigValidationError: if an override is out of range.
        UnknownConditionError: if a selected condition is not defined in the
            config.
    """
    data = config.model_dump()

    execution = data["execution"]
    _set(execution, "num_repetitions", overrides.reps)
    _set(execution, "max_concurrent", overrides.parallel)
    _set(execution, "timeout_seconds", overrides.timeout_seconds)
    _set(execution, "seed", overrides.seed)
    _set(execution["retry"], "max_attempts", overrides.max_attempts)
    if overrides.keep_workdirs:
        execution["keep_workdirs"] = True

    tasks = data["tasks"]
    _set(tasks, "path", overrides.tasks_dir)
    _set(tasks, "limit", overrides.limit)
    _set(tasks, "category", overrides.category)
    _set(tasks, "library", overrides.library)
    _set(tasks, "task_id", overrides.task_id)

    _set(data["agent"], "model", overrides.model)
    _set(data, "output_dir", overrides.output_dir)

    if overrides.conditions:
        configured = data["conditions"]
        unknown = [name for name in overrides.conditions if name not in configured]
        if unknown:
            raise UnknownConditionError(unknown=unknown, configured=list(configured))
        data["conditions"] = {
            name: configured[name] for name in dict.fromkeys(overrides.conditions)
        }

    try:
        return BenchConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
