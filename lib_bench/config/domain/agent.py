"""Agent configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_MODEL = "anthropic/claude-sonnet-4-20250514"


class AgentConfig(BaseModel, frozen=True):
    """The external coding agent invoked once per attempt."""

    binary: str = Field(default="opencode", min_length=1)
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    stream_format: str = Field(default="json", min_length=1)
    auth_file: Path = Path("~/.local/share/opencode/auth.json")
