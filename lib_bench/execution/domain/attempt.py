"""Retry state machine transitions for one execution."""

from enum import StrEnum


class AttemptOutcome(StrEnum):
    SUCCEEDED = "succeeded"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"


def next_outcome(exit_code: int, attempt: int, max_attempts: int) -> AttemptOutcome:
    """Classify a finished attempt. ``attempt`` is 1-based."""
    if exit_code == 0:
        return AttemptOutcome.SUCCEEDED
    if attempt < max_attempts:
        return AttemptOutcome.RETRYING
    return AttemptOutcome.EXHAUSTED
