"""Execution outcome value objects."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ToolCall(BaseModel, frozen=True):
    """One tool invocation reported in the agent's output stream."""

    tool: str
    call_id: str | None = None
    status: str | None = None
    input: Any = None
    output: Any = None


class AgentError(BaseModel, frozen=True):
    """A failure classification: parsed from the stream, or synthesized from the exit code."""

    name: str
    message: str


class ExecutionResult(BaseModel, frozen=True):
    """Terminal outcome of one WorkItem after the retry state machine settles.

    ``work_dir`` and ``sandbox_home`` belong to the final attempt and still
    exist on disk until the caller cleans them up.
    """

    task_id: str
    condition: str
    repetition_index: int = Field(ge=0)
    prompt: str
    raw_output: str
    extracted_files: dict[str, str]
    exit_code: int
    duration_ms: int = Field(ge=0)
    work_dir: Path
    sandbox_home: Path
    tool_calls: list[ToolCall]
    error: AgentError | None = None
    attempts: int = Field(ge=1)
