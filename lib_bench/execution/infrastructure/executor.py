"""SandboxedExecutor — runs one WorkItem through the retry state machine."""

import asyncio
import os
import time
from pathlib import Path

from lib_bench.config.domain.agent import AgentConfig
from lib_bench.config.domain.condition import ConditionConfig
from lib_bench.config.domain.execution import ExecutionConfig
from lib_bench.execution.domain.attempt import AttemptOutcome, next_outcome
from lib_bench.execution.domain.observer import ExecutionObserver
from lib_bench.execution.domain.process import ProcessLauncher, ProcessOutput
from lib_bench.execution.domain.prompt import build_prompt
from lib_bench.execution.domain.result import ExecutionResult
from lib_bench.execution.domain.sandbox import AttemptResources, Sandbox
from lib_bench.execution.infrastructure.code_extraction import (
    extract_code_from_disk,
    extract_code_from_response,
    merge_extracted_files,
    response_text,
)
from lib_bench.execution.infrastructure.errors import SpawnError
from lib_bench.execution.infrastructure.stream_parser import (
    extract_error,
    extract_tool_calls,
    parse_events,
    process_exit_error,
)
from lib_bench.execution.infrastructure.workspace import (
    create_sandbox_home,
    create_work_dir,
    inject_config,
    inject_context,
    remove_dirs,
)
from lib_bench.task.domain.task import Task


class SandboxedExecutor:
    """Executes the agent in a fresh sandbox per attempt, retrying non-zero exits.

    Every attempt owns a new Sandbox and WorkDir. Directories of a failed,
    non-final attempt are removed before the next attempt starts (unless
    keep_workdirs is set); the final attempt's directories are left for the
    caller, which removes them with ``cleanup`` once artifacts are stored.

    Does NOT inherit from Executor (structural typing via Protocol).
    """

    def __init__(
        self,
        agent: AgentConfig,
        conditions: dict[str, ConditionConfig],
        execution: ExecutionConfig,
        launcher: ProcessLauncher,
        observer: ExecutionObserver,
    ) -> None:
        self._agent = agent
        self._conditions = conditions
        self._execution = execution
        self._launcher = launcher
        self._observer = observer

    async def execute(
        self,
        task: Task,
        condition: str,
        repetition_index: int,
    ) -> ExecutionResult:
        """Run attempts until one succeeds or the attempt budget is spent.

        Agent and process failures are returned as data on the result.

        Raises:
            KeyError: if condition is not configured.
            ConfigTemplateError: if the condition template cannot be read.
        """
        condition_cfg = self._conditions[condition]
        max_attempts = self._execution.retry.max_attempts
        attempt = 1
        while True:
            self._observer.attempt_started(
                task_id=task.id,
                condition=condition,
                repetition_index=repetition_index,
                attempt=attempt,
                max_attempts=max_attempts,
            )
            result = await self._run_attempt(
                task=task,
                condition=condition,
                condition_cfg=condition_cfg,
                repetition_index=repetition_index,
                attempt=attempt,
            )
            outcome = next_outcome(
                exit_code=result.exit_code,
                attempt=attempt,
                max_attempts=max_attempts,
            )

            if outcome is AttemptOutcome.SUCCEEDED:
                self._observer.execution_succeeded(
                    task_id=task.id,
                    condition=condition,
                    repetition_index=repetition_index,
                    attempts=attempt,
                    duration_ms=result.duration_ms,
                )
                return result

            if outcome is AttemptOutcome.EXHAUSTED:
                self._observer.execution_exhausted(
                    task_id=task.id,
                    condition=condition,
                    repetition_index=repetition_index,
                    attempts=attempt,
                    exit_code=result.exit_code,
                    reason=result.error.message if result.error else "",
                )
                return result

            self._observer.attempt_retry(
                task_id=task.id,
                condition=condition,
                repetition_index=repetition_index,
                attempt=attempt,
                max_attempts=max_attempts,
                exit_code=result.exit_code,
            )
            await self._discard(_resources_of(result).paths())
            attempt += 1

    async def cleanup(self, result: ExecutionResult) -> None:
        await self._discard(_resources_of(result).paths())

    async def _discard(self, paths: list[Path]) -> None:
        if self._execution.keep_workdirs:
            return
        await asyncio.to_thread(remove_dirs, paths, self._observer)

    async def _prepare(
        self,
        task: Task,
        condition: str,
        condition_cfg: ConditionConfig,
        repetition_index: int,
    ) -> AttemptResources:
        base_dir = self._execution.temp_base_dir
        sandbox = await asyncio.to_thread(
            create_sandbox_home,
            base_dir,
            self._agent.auth_file,
            condition_cfg.skills_dir,
        )
        try:
            work_dir = await asyncio.to_thread(
                create_work_dir, base_dir, task.id, condition, repetition_index
            )
        except BaseException:
            await self._discard([sandbox.home])
            raise
        resources = AttemptResources(sandbox=sandbox, work_dir=work_dir)
        try:
            await asyncio.to_thread(
                inject_config,
                work_dir,
                condition_cfg.config_template,
                self._agent.model,
                sandbox.skills_dir,
                self._observer,
            )
            await asyncio.to_thread(inject_context, work_dir, task)
        except BaseException:
            await self._discard(resources.paths())
            raise
        return resources

    async def _run_attempt(
        self,
        task: Task,
        condition: str,
        condition_cfg: ConditionConfig,
        repetition_index: int,
        attempt: int,
    ) -> ExecutionResult:
        resources = await self._prepare(
            task=task,
            condition=condition,
            condition_cfg=condition_cfg,
            repetition_index=repetition_index,
        )
        try:
            return await self._attempt_in(
                resources=resources,
                task=task,
                condition=condition,
                condition_cfg=condition_cfg,
                repetition_index=repetition_index,
                attempt=attempt,
            )
        except BaseException:
            await self._discard(resources.paths())
            raise

    async def _attempt_in(
        self,
        resources: AttemptResources,
        task: Task,
        condition: str,
        condition_cfg: ConditionConfig,
        repetition_index: int,
        attempt: int,
    ) -> ExecutionResult:
        prompt = build_prompt(task.prompt, condition_cfg.prompt_suffix)

        started_at = time.monotonic()
        output = await self._invoke(
            prompt=prompt, resources=resources, condition_env=condition_cfg.env
        )
        duration_ms = int((time.monotonic() - started_at) * 1000)
        if output.timed_out:
            self._observer.attempt_timed_out(
                task_id=task.id,
                condition=condition,
                repetition_index=repetition_index,
                attempt=attempt,
                timeout_seconds=self._execution.timeout_seconds,
            )

        raw_output = output.combined
        events = parse_events(raw_output)
        error = extract_error(events)
        if error is None and output.exit_code != 0:
            error = process_exit_error(
                binary=self._agent.binary, exit_code=output.exit_code
            )

        disk_files = await asyncio.to_thread(
            extract_code_from_disk, resources.work_dir
        )
        response_files = extract_code_from_response(
            response_text(raw_output=raw_output, events=events)
        )

        return ExecutionResult(
            task_id=task.id,
            condition=condition,
            repetition_index=repetition_index,
            prompt=prompt,
            raw_output=raw_output,
            extracted_files=merge_extracted_files(
                disk_files=disk_files, response_files=response_files
            ),
            exit_code=output.exit_code,
            duration_ms=duration_ms,
            work_dir=resources.work_dir,
            sandbox_home=resources.sandbox.home,
            tool_calls=extract_tool_calls(events),
            error=error,
            attempts=attempt,
        )

    async def _invoke(
        self,
        prompt: str,
        resources: AttemptResources,
        condition_env: dict[str, str],
    ) -> ProcessOutput:
        """Run the agent once; a spawn failure becomes a one-line output with exit code 1."""
        binary = self._agent.binary
        command = [
            binary,
            "run",
            "--format",
            self._agent.stream_format,
            "--model",
            self._agent.model,
            prompt,
        ]
        env = {
            **os.environ,
            **condition_env,
            "HOME": str(resources.sandbox.home),
        }
        try:
            return await self._launcher.run(
                command=command,
                cwd=resources.work_dir,
                env=env,
                timeout_seconds=self._execution.timeout_seconds,
            )
        except SpawnError as exc:
            self._observer.spawn_failed(binary=binary, reason=exc.reason)
            return ProcessOutput(
                stdout=f"Error running {binary}: {exc.reason}",
                stderr="",
                exit_code=1,
            )


def _resources_of(result: ExecutionResult) -> AttemptResources:
    return AttemptResources(
        sandbox=Sandbox(home=result.sandbox_home),
        work_dir=result.work_dir,
    )
