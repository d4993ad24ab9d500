"""Attempt-scoped isolation resources."""

from pathlib import Path

from pydantic import BaseModel


class Sandbox(BaseModel, frozen=True):
    """An isolated HOME for one attempt, with an optional copied skills payload."""

    home: Path
    skills_dir: Path | None = None


class AttemptResources(BaseModel, frozen=True):
    """Everything one attempt owns on disk. Never shared with another attempt."""

    sandbox: Sandbox
    work_dir: Path

    def paths(self) -> list[Path]:
        return [self.work_dir, self.sandbox.home]
