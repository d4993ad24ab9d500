"""CLI entrypoint for lib-bench — typer app with a `run` command."""

import asyncio
import secrets
import signal
import sys
from pathlib import Path

import structlog
import typer

from lib_bench.cli.overrides import RunOverrides, apply_overrides
from lib_bench.config.domain.config import BenchConfig
from lib_bench.config.infrastructure.observer import StructlogConfigObserver
from lib_bench.config.infrastructure.yaml_loader import YamlConfigLoader
from lib_bench.core.errors import LibBenchError
from lib_bench.evaluation.application.runner import BenchmarkRunner
from lib_bench.evaluation.domain.cancellation import CancellationToken
from lib_bench.evaluation.domain.evaluator import EvaluatorConfig
from lib_bench.evaluation.domain.observer import EvaluationObserver
from lib_bench.evaluation.domain.summary import RunSummary
from lib_bench.evaluation.infrastructure.composite_observer import (
    CompositeEvaluationObserver,
)
from lib_bench.evaluation.infrastructure.evaluator import ExecutionOnlyEvaluator
from lib_bench.evaluation.infrastructure.observer import StructlogEvaluationObserver
from lib_bench.evaluation.infrastructure.progress_observer import (
    ProgressEvaluationObserver,
)
from lib_bench.execution.infrastructure.executor import SandboxedExecutor
from lib_bench.execution.infrastructure.observer import StructlogExecutionObserver
from lib_bench.execution.infrastructure.subprocess_launcher import (
    SubprocessLauncher,
    check_binary,
    get_agent_version,
)
from lib_bench.nia.application.setup import NiaSetup
from lib_bench.nia.infrastructure.api_key import agent_env, resolve_api_key
from lib_bench.nia.infrastructure.http_client import HttpNiaClient
from lib_bench.nia.infrastructure.observer import StructlogNiaObserver
from lib_bench.scheduling.domain.queue import stratified_sample
from lib_bench.scheduling.domain.rng import seeded_random
from lib_bench.scheduling.domain.work_item import WorkItem
from lib_bench.storage.infrastructure.json_store import JsonResultStore
from lib_bench.task.domain.task import Task
from lib_bench.task.infrastructure.json_loader import JsonTaskLoader
from lib_bench.task.infrastructure.observer import StructlogTaskObserver

# Upper bound (exclusive) for a randomly drawn run seed.
_SEED_BOUND = 2**31 - 1

app = typer.Typer(add_completion=False)


@app.callback()
def main() -> None:
    """lib-bench: benchmark coding agents on library-specific tasks."""


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _load_tasks(config: BenchConfig) -> list[Task]:
    loader = JsonTaskLoader(observer=StructlogTaskObserver())
    result = loader.load(config=config.tasks)
    if result.issues:
        typer.echo(f"Warning: {len(result.issues)} task file(s) failed validation:")
        for issue in result.issues:
            typer.echo(f"  {issue.path}: {issue.reason}")
    return result.tasks


def _print_plan(plan: list[WorkItem]) -> None:
    typer.echo("")
    typer.echo("--- Execution Plan (Dry Run) ---")
    typer.echo("")
    for number, item in enumerate(plan, start=1):
        typer.echo(
            f"  {number:>4}. Task: {item.task_id} | Condition: {item.condition}"
            f" | Rep: {item.repetition_index + 1}"
        )
    typer.echo("")
    typer.echo(f"Total: {len(plan)} items")


def _prepare_nia(
    config: BenchConfig,
    tasks: list[Task],
    skip_setup: bool,
) -> BenchConfig:
    """Index Nia sources and hand the key to the agents of Nia conditions.

    Raises:
        NiaApiKeyError: if a Nia condition is selected and no key is found.
    """
    names = [name for name in config.conditions if name in config.nia.conditions]
    if not names:
        return config
    api_key = resolve_api_key()
    if not skip_setup:
        asyncio.run(_run_nia_setup(config=config, tasks=tasks, api_key=api_key))
    env = agent_env(api_key=api_key, base_url=config.nia.base_url)
    conditions = dict(config.conditions)
    for name in names:
        cfg = conditions[name]
        conditions[name] = cfg.model_copy(update={"env": {**env, **cfg.env}})
    return config.model_copy(update={"conditions": conditions})


async def _run_nia_setup(
    config: BenchConfig,
    tasks: list[Task],
    api_key: str,
) -> None:
    client = HttpNiaClient(api_key=api_key, base_url=config.nia.base_url)
    async with client:
        setup = NiaSetup(
            client=client, observer=StructlogNiaObserver(), config=config.nia
        )
        report = await setup.run(tasks)
    typer.echo(
        f"Nia setup: {len(report.cached)} cached, {len(report.indexed)} indexed,"
        f" {len(report.failed)} failed"
    )


async def _run_with_signals(
    runner: BenchmarkRunner,
    token: CancellationToken,
) -> RunSummary:
    """Run the benchmark with SIGINT/SIGTERM flipping the cancellation token.

    Signals only stop new items from being admitted; in-flight items finish.
    """
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, token.cancel)
    try:
        return await runner.run()
    finally:
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(signum)


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to benchmark config YAML"),
    reps: int | None = typer.Option(
        None, "--reps", help="Repetitions per (task, condition)"
    ),
    parallel: int | None = typer.Option(
        None, "--parallel", help="Maximum concurrent agent runs"
    ),
    condition: list[str] | None = typer.Option(
        None, "--condition", help="Run only this condition (repeatable)"
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Per-attempt timeout in seconds"
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for the run order"),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for run output",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the execution plan and exit"
    ),
    model: str | None = typer.Option(None, "--model", help="Agent model override"),
    keep_workdirs: bool = typer.Option(
        False, "--keep-workdirs", help="Do not remove sandbox directories"
    ),
    limit: int | None = typer.Option(
        None, "--limit", help="Stratified sample of at most N tasks"
    ),
    category: str | None = typer.Option(None, "--category", help="Task category"),
    library: str | None = typer.Option(None, "--library", help="Task library"),
    task: str | None = typer.Option(None, "--task", help="Single task id"),
    tasks_dir: Path | None = typer.Option(
        None, "--tasks-dir", help="Tasks root directory"
    ),
    max_retries: int | None = typer.Option(
        None, "--max-retries", help="Maximum attempts per work item"
    ),
    skip_judge: bool = typer.Option(
        False, "--skip-judge", help="Ask the evaluator to skip judging"
    ),
    skip_nia_setup: bool = typer.Option(
        False, "--skip-nia-setup", help="Do not index Nia sources before the run"
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Run a lib-bench benchmark from a YAML config file."""
    try:
        _configure_structlog(log_format=log_format)

        loader = YamlConfigLoader(observer=StructlogConfigObserver())
        try:
            config = loader.load(path=config_path)
            config = apply_overrides(
                config=config,
                overrides=RunOverrides(
                    reps=reps,
                    parallel=parallel,
                    conditions=condition or None,
                    timeout_seconds=timeout,
                    seed=seed,
                    output_dir=output_dir,
                    model=model,
                    keep_workdirs=keep_workdirs,
                    limit=limit,
                    category=category,
                    library=library,
                    task_id=task,
                    tasks_dir=tasks_dir,
                    max_attempts=max_retries,
                ),
            )
            tasks = _load_tasks(config=config)
        except LibBenchError as exc:
            typer.echo(str(exc))
            raise typer.Exit(code=1) from exc

        if not tasks:
            typer.echo("No tasks found matching the specified filters.")
            raise typer.Exit(code=1)

        run_seed = config.execution.seed
        if run_seed is None:
            run_seed = secrets.randbelow(_SEED_BOUND)
        if config.tasks.limit is not None:
            tasks = stratified_sample(
                tasks=tasks, limit=config.tasks.limit, rng=seeded_random(run_seed)
            )

        execution = config.execution
        typer.echo(f"Loaded {len(tasks)} task(s)")
        typer.echo(
            f"Seed: {run_seed} | Parallel: {execution.max_concurrent}"
            f" | Model: {config.agent.model}"
        )

        launcher = SubprocessLauncher()
        agent_version = "unknown"
        if not dry_run:
            binary = config.agent.binary
            if not check_binary(binary):
                typer.echo(f"Error: {binary} not found on PATH. Install it first.")
                raise typer.Exit(code=1)
            detected = asyncio.run(get_agent_version(launcher=launcher, binary=binary))
            if detected is None:
                typer.echo(f"Warning: could not determine {binary} version")
            agent_version = detected or "unknown"
            config = _prepare_nia(
                config=config, tasks=tasks, skip_setup=skip_nia_setup
            )

        token = CancellationToken()
        observers: list[EvaluationObserver] = [StructlogEvaluationObserver()]
        if log_format != "json" and not dry_run:
            observers.append(ProgressEvaluationObserver())

        runner = BenchmarkRunner(
            config=config,
            tasks=tasks,
            executor=SandboxedExecutor(
                agent=config.agent,
                conditions=config.conditions,
                execution=execution,
                launcher=launcher,
                observer=StructlogExecutionObserver(),
            ),
            evaluator=ExecutionOnlyEvaluator(),
            store=JsonResultStore(output_dir=config.output_dir),
            observer=CompositeEvaluationObserver(observers=observers),
            seed=run_seed,
            cancellation=token,
            evaluator_config=EvaluatorConfig(skip_judge=skip_judge),
            agent_version=agent_version,
            cli_args=sys.argv[1:],
        )

        if dry_run:
            _print_plan(plan=runner.plan())
            return

        summary = asyncio.run(_run_with_signals(runner=runner, token=token))

        typer.echo(f"Results directory: {summary.run_dir}")
        typer.echo(
            f"Completed: {summary.completed_items}/{summary.total_items}"
            f" (failed: {summary.failed_items}, skipped: {summary.skipped_items})"
        )
        if summary.status == "interrupted":
            typer.echo("Benchmark interrupted; in-flight items were completed.")

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        typer.echo("Benchmark interrupted.")
        sys.exit(1)
    except LibBenchError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


if __name__ == "__main__":
    app()
