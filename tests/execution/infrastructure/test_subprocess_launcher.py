"""Tests for the asyncio subprocess launcher and agent binary probing."""

import os
import shutil
import stat
import time
from pathlib import Path

import pytest

from lib_bench.execution.domain.process import ProcessOutput
from lib_bench.execution.infrastructure.errors import SpawnError
from lib_bench.execution.infrastructure.subprocess_launcher import (
    SubprocessLauncher,
    check_binary,
    get_agent_version,
)
from tests.execution.fake_launcher import FakeProcessLauncher


def _script(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "stub-agent"
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class TestSubprocessLauncher:
    async def test_captures_both_streams_and_exit_code(self, tmp_path: Path) -> None:
        script = _script(tmp_path, 'echo "out line"\necho "err line" >&2\nexit 3')

        output = await SubprocessLauncher().run(command=[str(script)])

        assert output.stdout == "out line\n"
        assert output.stderr == "err line\n"
        assert output.exit_code == 3
        assert output.timed_out is False

    async def test_runs_in_cwd_with_env(self, tmp_path: Path) -> None:
        script = _script(tmp_path, 'pwd\necho "$HOME"')
        work_dir = tmp_path / "work"
        work_dir.mkdir()

        output = await SubprocessLauncher().run(
            command=[str(script)],
            cwd=work_dir,
            env={**os.environ, "HOME": "/sandbox/home"},
        )

        lines = output.stdout.splitlines()
        assert Path(lines[0]).resolve() == work_dir.resolve()
        assert lines[1] == "/sandbox/home"

    async def test_stdin_is_closed(self, tmp_path: Path) -> None:
        script = _script(tmp_path, "cat\necho done")

        output = await SubprocessLauncher().run(
            command=[str(script)], timeout_seconds=10
        )

        assert output.stdout == "done\n"
        assert output.timed_out is False

    async def test_timeout_kills_process_group(self, tmp_path: Path) -> None:
        # The child sleep would hold the pipes open if only the shell died.
        script = _script(tmp_path, "echo started\nsleep 30 &\nwait")

        started_at = time.monotonic()
        output = await SubprocessLauncher().run(
            command=[str(script)], timeout_seconds=0.5
        )

        assert output.timed_out is True
        assert output.exit_code != 0
        assert output.stdout == "started\n"
        assert time.monotonic() - started_at < 10

    @pytest.mark.skipif(shutil.which("setsid") is None, reason="needs setsid")
    async def test_timeout_is_bounded_when_a_detached_child_holds_the_pipes(
        self, tmp_path: Path
    ) -> None:
        # setsid moves the child out of the killed group; it keeps stdout open.
        script = _script(tmp_path, "echo started\nsetsid sleep 8 &\nsleep 60")

        started_at = time.monotonic()
        output = await SubprocessLauncher(kill_grace_seconds=0.5).run(
            command=[str(script)], timeout_seconds=0.5
        )
        elapsed = time.monotonic() - started_at

        assert output.timed_out is True
        assert output.stdout == "started\n"
        assert elapsed < 4

    async def test_missing_binary_raises_spawn_error(self, tmp_path: Path) -> None:
        missing = str(tmp_path / "no-such-agent")

        with pytest.raises(SpawnError) as exc_info:
            await SubprocessLauncher().run(command=[missing])

        assert exc_info.value.binary == missing


class TestCheckBinary:
    def test_finds_binary_on_path(self) -> None:
        assert check_binary("sh") is True

    def test_missing_binary(self) -> None:
        assert check_binary("definitely-not-an-agent-binary-xyz") is False


class TestGetAgentVersion:
    async def test_returns_trimmed_stdout(self) -> None:
        launcher = FakeProcessLauncher(
            effects=[ProcessOutput(stdout="1.4.2\n", stderr="", exit_code=0)]
        )

        version = await get_agent_version(launcher=launcher, binary="opencode")

        assert version == "1.4.2"
        assert launcher.calls[0]["command"] == ["opencode", "--version"]

    async def test_nonzero_exit_gives_none(self) -> None:
        launcher = FakeProcessLauncher(
            effects=[ProcessOutput(stdout="1.0", stderr="", exit_code=2)]
        )

        assert await get_agent_version(launcher=launcher, binary="opencode") is None

    async def test_spawn_failure_gives_none(self) -> None:
        launcher = FakeProcessLauncher(
            effects=[SpawnError(binary="opencode", reason="not found")]
        )

        assert await get_agent_version(launcher=launcher, binary="opencode") is None

    async def test_empty_output_gives_none(self) -> None:
        launcher = FakeProcessLauncher(
            effects=[ProcessOutput(stdout="  \n", stderr="", exit_code=0)]
        )

        assert await get_agent_version(launcher=launcher, binary="opencode") is None
