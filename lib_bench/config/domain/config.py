"""Top-level BenchConfig aggregate — the root configuration object."""

from pathlib import Path

from pydantic import BaseModel, Field

from lib_bench.config.domain.agent import AgentConfig
from lib_bench.config.domain.condition import ConditionConfig
from lib_bench.config.domain.execution import ExecutionConfig
from lib_bench.config.domain.nia import NiaConfig
from lib_bench.config.domain.tasks import TasksConfig

type ConditionName = str


class BenchConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a lib-bench run."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    tasks: TasksConfig
    agent: AgentConfig = AgentConfig()
    conditions: dict[ConditionName, ConditionConfig] = Field(min_length=1)
    execution: ExecutionConfig = ExecutionConfig()
    nia: NiaConfig = NiaConfig()
    output_dir: Path = Path("results")
