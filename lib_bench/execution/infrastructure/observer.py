"""StructlogExecutionObserver — production observer that delegates to structlog."""

import structlog


class StructlogExecutionObserver:
    """Logs execution domain events to structlog.

    Does NOT inherit from ExecutionObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def attempt_started(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempt: int,
        max_attempts: int,
    ) -> None:
        self._log.debug(
            "execution.attempt.started",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            attempt=attempt,
            max_attempts=max_attempts,
        )

    def attempt_timed_out(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempt: int,
        timeout_seconds: float,
    ) -> None:
        self._log.warning(
            "execution.attempt.timed_out",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            attempt=attempt,
            timeout_seconds=timeout_seconds,
        )

    def attempt_retry(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempt: int,
        max_attempts: int,
        exit_code: int,
    ) -> None:
        self._log.warning(
            "execution.attempt.retry",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            attempt=attempt,
            max_attempts=max_attempts,
            exit_code=exit_code,
        )

    def execution_succeeded(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempts: int,
        duration_ms: int,
    ) -> None:
        self._log.info(
            "execution.succeeded",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            attempts=attempts,
            duration_ms=duration_ms,
        )

    def execution_exhausted(
        self,
        task_id: str,
        condition: str,
        repetition_index: int,
        attempts: int,
        exit_code: int,
        reason: str,
    ) -> None:
        self._log.warning(
            "execution.exhausted",
            task_id=task_id,
            condition=condition,
            repetition_index=repetition_index,
            attempts=attempts,
            exit_code=exit_code,
            reason=reason,
        )

    def spawn_failed(self, binary: str, reason: str) -> None:
        self._log.error("execution.spawn_failed", binary=binary, reason=reason)

    def config_template_malformed(self, path: str, reason: str) -> None:
        self._log.warning(
            "execution.config_template_malformed",
            path=path,
            reason=reason,
            message="Template is not valid JSON; written without removing skills",
        )

    def cleanup_failed(self, path: str, reason: str) -> None:
        self._log.warning("execution.cleanup_failed", path=path, reason=reason)
