"""ProcessLauncher port and its output value object."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel


class ProcessOutput(BaseModel, frozen=True):
    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False

    @property
    def combined(self) -> str:
        """Both streams joined with a newline; the agent may write events to either."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class ProcessLauncher(Protocol):
    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None,
        env: Mapping[str, str] | None,
        timeout_seconds: float | None,
    ) -> ProcessOutput:
        """Run command to completion, killing it when the timeout elapses.

        Raises:
            SpawnError: if the process could not be started.
        """
        ...
