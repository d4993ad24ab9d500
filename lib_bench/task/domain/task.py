"""Task value objects — the benchmark prompts an agent is asked to solve."""

from typing import Any, Literal

from pydantic import BaseModel, Field

type Category = Literal["bleeding_edge", "version_locked_write", "version_locked_audit"]

CATEGORIES: tuple[Category, ...] = (
    "bleeding_edge",
    "version_locked_write",
    "version_locked_audit",
)


class TaskContext(BaseModel, frozen=True):
    """Starter files written into the agent's working directory before it runs."""

    code: dict[str, str] | None = None
    package_json: str | None = None


class TestSpec(BaseModel, frozen=True):
    """Static checks consumed by the external scorer; carried through untouched."""

    __test__ = False

    ast_checks: list[dict[str, Any]]
    type_check: bool | None = None


class RubricCriterion(BaseModel, frozen=True):
    name: str
    weight: float = Field(ge=0.0, le=1.0)
    description: str


class Rubric(BaseModel, frozen=True):
    criteria: list[RubricCriterion]


class Task(BaseModel, frozen=True):
    """A single benchmark task loaded from a JSON task file."""

    id: str = Field(min_length=1)
    category: Category
    library: str = Field(min_length=1)
    target_version: str
    prompt: str
    context: TaskContext | None = None
    reference_solution: str
    test_spec: TestSpec
    rubric: Rubric
    common_hallucinations: list[str]
