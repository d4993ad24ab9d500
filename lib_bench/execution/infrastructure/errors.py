"""Error types raised by execution infrastructure."""

from pathlib import Path

from lib_bench.core.errors import LibBenchError


class SpawnError(LibBenchError):
    """Raised when the agent process cannot be started at all."""

    def __init__(self, binary: str, reason: str) -> None:
        self.binary = binary
        self.reason = reason
        super().__init__(f"Failed to start {binary}: {reason}")


class ConfigTemplateError(LibBenchError):
    """Raised when a condition's config template cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read config template {path}: {reason}")
