"""Fake ProcessLauncher for use in tests — replays scripted outputs in order."""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from lib_bench.execution.domain.process import ProcessOutput

type LaunchEffect = ProcessOutput | Exception | Callable[[Path | None], ProcessOutput]


class FakeProcessLauncher:
    """Returns the next scripted effect on every run() call.

    An Exception effect is raised. A callable effect receives the working
    directory, so a test can simulate files the agent writes to disk.
    The last effect repeats once the script is exhausted.
    """

    def __init__(self, effects: list[LaunchEffect]) -> None:
        self._effects = effects
        self.calls: list[dict[str, object]] = []

    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None,
        env: Mapping[str, str] | None,
        timeout_seconds: float | None,
    ) -> ProcessOutput:
        self.calls.append(
            {
                "command": list(command),
                "cwd": cwd,
                "env": dict(env) if env is not None else None,
                "timeout_seconds": timeout_seconds,
            }
        )
        index = min(len(self.calls) - 1, len(self._effects) - 1)
        effect = self._effects[index]
        if isinstance(effect, Exception):
            raise effect
        if isinstance(effect, ProcessOutput):
            return effect
        return effect(cwd)
