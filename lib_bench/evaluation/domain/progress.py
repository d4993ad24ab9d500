"""Completion counting and ETA projection over a rolling window of durations."""

import time
from collections import deque

from pydantic import BaseModel


class ProgressSnapshot(BaseModel, frozen=True):
    completed: int
    total: int
    elapsed_ms: int
    eta_ms: int | None


class ProgressTracker:
    """Counts completed work items and projects the remaining time.

    The ETA is the mean of the last ``window`` item durations multiplied by
    the number of items still outstanding.
    """

    def __init__(self, total: int, window: int = 10) -> None:
        self._total = total
        self._completed = 0
        self._durations: deque[int] = deque(maxlen=window)
        self._started_at = time.monotonic()

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def total(self) -> int:
        return self._total

    def record(self, duration_ms: int) -> ProgressSnapshot:
        self._completed += 1
        self._durations.append(duration_ms)
        return ProgressSnapshot(
            completed=self._completed,
            total=self._total,
            elapsed_ms=int((time.monotonic() - self._started_at) * 1000),
            eta_ms=self.eta_ms(),
        )

    def eta_ms(self) -> int | None:
        if not self._durations:
            return None
        average = sum(self._durations) / len(self._durations)
        return int(average * max(self._total - self._completed, 0))


def format_duration(ms: float) -> str:
    """Render ms as "850ms", "42s", "3m07s" or "1h05m"."""
    if ms < 1000:
        return f"{round(ms)}ms"
    seconds = int(ms // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    if hours > 0:
        return f"{hours}h{minutes % 60:02d}m"
    if minutes > 0:
        return f"{minutes}m{seconds % 60:02d}s"
    return f"{seconds}s"
