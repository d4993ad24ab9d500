"""Error types raised by task infrastructure."""

from lib_bench.core.errors import LibBenchError


class TaskLoadError(LibBenchError):
    """Raised when the tasks directory itself cannot be read."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load tasks: {reason}")
