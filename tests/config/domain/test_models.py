"""Tests for the config domain models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from lib_bench.config.domain.agent import DEFAULT_MODEL, AgentConfig
from lib_bench.config.domain.condition import ConditionConfig
from lib_bench.config.domain.config import BenchConfig
from lib_bench.config.domain.execution import ExecutionConfig, RetryConfig
from lib_bench.config.domain.tasks import TasksConfig


def _config(**overrides: object) -> BenchConfig:
    data: dict[str, object] = {
        "name": "bench",
        "version": "1",
        "tasks": {"path": "tasks"},
        "conditions": {"baseline": {"config_template": "baseline.json"}},
    }
    data.update(overrides)
    return BenchConfig.model_validate(data)


class TestDefaults:
    def test_agent_defaults(self) -> None:
        agent = AgentConfig()

        assert agent.binary == "opencode"
        assert agent.model == DEFAULT_MODEL
        assert agent.stream_format == "json"

    def test_execution_defaults(self) -> None:
        execution = ExecutionConfig()

        assert execution.num_repetitions == 3
        assert execution.max_concurrent == 1
        assert execution.timeout_seconds == 300.0
        assert execution.keep_workdirs is False
        assert execution.temp_base_dir == Path("/tmp/lib-bench")
        assert execution.retry == RetryConfig(max_attempts=3)

    def test_condition_defaults(self) -> None:
        condition = ConditionConfig(config_template=Path("c.json"))

        assert condition.prompt_suffix == ""
        assert condition.skills_dir is None


class TestValidation:
    def test_requires_at_least_one_condition(self) -> None:
        with pytest.raises(ValidationError):
            _config(conditions={})

    @pytest.mark.parametrize("field", ["num_repetitions", "max_concurrent"])
    def test_counts_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            ExecutionConfig.model_validate({field: 0})

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ExecutionConfig(timeout_seconds=0)

    def test_max_attempts_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=0)

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TasksConfig.model_validate({"path": "tasks", "category": "legacy"})

    def test_models_are_frozen(self) -> None:
        cfg = _config()

        with pytest.raises(ValidationError):
            cfg.name = "other"  # type: ignore[misc]
