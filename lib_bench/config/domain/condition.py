"""Benchmark condition configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field


class ConditionConfig(BaseModel, frozen=True):
    """A context-augmentation strategy the agent is run under.

    ``config_template`` is the agent configuration written into each working
    directory; ``skills_dir`` holds skill payloads copied into the sandbox.
    ``env`` is added to the agent process environment.
    """

    config_template: Path
    prompt_suffix: str = ""
    skills_dir: Path | None = None
    env: dict[str, str] = Field(default_factory=dict)
