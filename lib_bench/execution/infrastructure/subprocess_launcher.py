"""asyncio subprocess implementation of the ProcessLauncher port."""

import asyncio
import contextlib
import os
import shutil
import signal
from collections.abc import Mapping, Sequence
from pathlib import Path

from lib_bench.execution.domain.process import ProcessLauncher, ProcessOutput
from lib_bench.execution.infrastructure.errors import SpawnError


class SubprocessLauncher:
    """Runs a command with both output streams captured concurrently.

    The child gets its own session, so a timeout kills the whole process
    group, including anything the agent spawned. A descendant that left the
    group can still hold the pipes open; after a kill the launcher waits at
    most ``kill_grace_seconds`` for them to close, then abandons them and
    returns the partial output.

    Does NOT inherit from ProcessLauncher (structural typing via Protocol).
    """

    def __init__(self, kill_grace_seconds: float = 5.0) -> None:
        self._kill_grace_seconds = kill_grace_seconds

    async def run(
        self,
        command: Sequence[str],
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout_seconds: float | None = None,
    ) -> ProcessOutput:
        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as exc:
            raise SpawnError(binary=command[0], reason=str(exc)) from exc

        stdout = bytearray()
        stderr = bytearray()
        drain = asyncio.gather(
            _drain(proc.stdout, stdout),
            _drain(proc.stderr, stderr),
        )
        timed_out = False
        try:
            await asyncio.wait_for(proc.wait(), timeout=timeout_seconds)
        except TimeoutError:
            timed_out = True
            _kill_group(proc)
        except BaseException:
            _kill_group(proc)
            drain.cancel()
            raise

        if timed_out:
            await self._settle(proc=proc, drain=drain)
        else:
            await drain

        return ProcessOutput(
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=proc.returncode if proc.returncode is not None else 1,
            timed_out=timed_out,
        )

    async def _settle(
        self,
        proc: asyncio.subprocess.Process,
        drain: asyncio.Future[list[None]],
    ) -> None:
        try:
            await asyncio.wait_for(
                _finish(proc=proc, drain=drain),
                timeout=self._kill_grace_seconds,
            )
        except TimeoutError:
            drain.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await drain
            # Closing the transport drops the pipes a stray descendant holds.
            proc._transport.close()  # type: ignore[attr-defined]  # noqa: SLF001


async def _finish(
    proc: asyncio.subprocess.Process,
    drain: asyncio.Future[list[None]],
) -> None:
    await drain
    await proc.wait()


async def _drain(stream: asyncio.StreamReader | None, sink: bytearray) -> None:
    # Output read before a timeout is kept in sink, so a killed run still
    # returns everything it printed.
    if stream is None:
        return
    while chunk := await stream.read(65536):
        sink.extend(chunk)


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    # The process may already have exited between the timeout and the kill.
    with contextlib.suppress(ProcessLookupError):
        os.killpg(proc.pid, signal.SIGKILL)


def check_binary(binary: str) -> bool:
    """True when binary resolves on PATH (or is an executable path)."""
    return shutil.which(binary) is not None


async def get_agent_version(launcher: ProcessLauncher, binary: str) -> str | None:
    """Return ``<binary> --version`` output, or None when it cannot be determined."""
    try:
        output = await launcher.run(
            command=[binary, "--version"],
            cwd=None,
            env=None,
            timeout_seconds=30.0,
        )
    except SpawnError:
        return None
    if output.exit_code != 0 or output.timed_out:
        return None
    return output.stdout.strip() or None
