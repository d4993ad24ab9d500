"""EvaluationResult — the scorecard persisted once per WorkItem."""

from typing import Any

from pydantic import BaseModel, Field

from lib_bench.execution.domain.result import AgentError


class EvaluationResult(BaseModel, frozen=True):
    """What the evaluator made of one execution.

    Scores are None when no scoring engine ran. ``details`` carries
    evaluator-specific payloads (check results, judge reasoning) verbatim.
    """

    task_id: str
    condition: str
    repetition_index: int = Field(ge=0)
    category: str
    library: str
    target_version: str
    prompt: str
    extracted_files: dict[str, str]
    duration_ms: int = Field(ge=0)
    exit_code: int
    attempts: int = Field(ge=1)
    agent_error: AgentError | None = None
    tool_call_count: int = Field(ge=0)
    tool_call_summary: dict[str, int]
    test_score: float | None = None
    judge_score: float | None = None
    final_score: float | None = None
    details: dict[str, Any] = Field(default_factory=dict)
