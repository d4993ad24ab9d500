"""ExecutionOnlyEvaluator — records an execution's outcome without scoring it."""

from collections import Counter

from lib_bench.evaluation.domain.evaluator import AgentMeta, EvaluatorConfig
from lib_bench.evaluation.domain.result import EvaluationResult
from lib_bench.task.domain.task import Task


class ExecutionOnlyEvaluator:
    """Builds an EvaluationResult from the task and agent metadata alone.

    Scores stay None; a scoring engine plugs in as another Evaluator.

    Does NOT inherit from Evaluator (structural typing via Protocol).
    """

    async def evaluate(
        self,
        task: Task,
        extracted_files: dict[str, str],
        condition: str,
        repetition_index: int,
        config: EvaluatorConfig,
        agent_meta: AgentMeta,
    ) -> EvaluationResult:
        summary = Counter(call.tool for call in agent_meta.tool_calls)
        return EvaluationResult(
            task_id=task.id,
            condition=condition,
            repetition_index=repetition_index,
            category=task.category,
            library=task.library,
            target_version=task.target_version,
            prompt=agent_meta.prompt,
            extracted_files=extracted_files,
            duration_ms=agent_meta.duration_ms,
            exit_code=agent_meta.exit_code,
            attempts=agent_meta.attempts,
            agent_error=agent_meta.error,
            tool_call_count=len(agent_meta.tool_calls),
            tool_call_summary=dict(summary),
            details={"skip_judge": config.skip_judge},
        )
