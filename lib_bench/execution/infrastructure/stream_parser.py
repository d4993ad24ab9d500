"""Parsing of the agent's newline-delimited JSON event stream."""

from pydantic import ValidationError

from lib_bench.execution.domain.events import (
    STREAM_EVENT_ADAPTER,
    ErrorEvent,
    StreamEvent,
    TextEvent,
    ToolUseEvent,
)
from lib_bench.execution.domain.result import AgentError, ToolCall


def parse_events(raw_output: str) -> list[StreamEvent]:
    """Parse every line that is a known event; banner and log noise is skipped."""
    events: list[StreamEvent] = []
    for line in raw_output.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            events.append(STREAM_EVENT_ADAPTER.validate_json(stripped))
        except ValidationError:
            continue
    return events


def extract_text(events: list[StreamEvent]) -> str:
    """Concatenate text event payloads in arrival order."""
    return "".join(
        event.part.text
        for event in events
        if isinstance(event, TextEvent) and event.part is not None
    )


def extract_tool_calls(events: list[StreamEvent]) -> list[ToolCall]:
    calls: list[ToolCall] = []
    for event in events:
        if not isinstance(event, ToolUseEvent) or event.part is None:
            continue
        part = event.part
        if not part.tool:
            continue
        state = part.state
        calls.append(
            ToolCall(
                tool=part.tool,
                call_id=part.call_id,
                status=state.status if state else None,
                input=state.input if state else None,
                output=state.output if state else None,
            )
        )
    return calls


def extract_error(events: list[StreamEvent]) -> AgentError | None:
    """
    Reduce all error events to one AgentError.

    The name is the first error's name; messages from every error are joined
    with "; ", falling back to the error's name when it carries no message.
    """
    details = [
        event.error
        for event in events
        if isinstance(event, ErrorEvent) and event.error is not None
    ]
    if not details:
        return None

    messages: list[str] = []
    for detail in details:
        message = detail.data.message if detail.data else None
        if isinstance(message, str) and message:
            messages.append(message)
        else:
            messages.append(detail.name or "Unknown error")

    return AgentError(
        name=details[0].name or "UnknownError",
        message="; ".join(messages),
    )


def process_exit_error(binary: str, exit_code: int) -> AgentError:
    """Generic error for a non-zero exit that produced no structured error event."""
    return AgentError(
        name="ProcessError",
        message=f"{binary} exited with code {exit_code}",
    )
