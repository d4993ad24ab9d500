"""Evaluator port — scores an execution's extracted files."""

from typing import Protocol

from pydantic import BaseModel

from lib_bench.evaluation.domain.result import EvaluationResult
from lib_bench.execution.domain.result import AgentError, ExecutionResult, ToolCall
from lib_bench.task.domain.task import Task


class EvaluatorConfig(BaseModel, frozen=True):
    skip_judge: bool = False


class AgentMeta(BaseModel, frozen=True):
    """Facts about the agent run that an evaluator may fold into its result."""

    prompt: str
    tool_calls: list[ToolCall]
    error: AgentError | None = None
    exit_code: int
    duration_ms: int
    attempts: int

    @classmethod
    def from_execution(cls, result: ExecutionResult) -> "AgentMeta":
        return cls(
            prompt=result.prompt,
            tool_calls=result.tool_calls,
            error=result.error,
            exit_code=result.exit_code,
            duration_ms=result.duration_ms,
            attempts=result.attempts,
        )


class Evaluator(Protocol):
    async def evaluate(
        self,
        task: Task,
        extracted_files: dict[str, str],
        condition: str,
        repetition_index: int,
        config: EvaluatorConfig,
        agent_meta: AgentMeta,
    ) -> EvaluationResult: ...
