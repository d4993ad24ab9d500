"""Stream events emitted by the agent, one JSON object per output line.

Each event is a closed variant keyed by its ``type`` field. Lines that are not
JSON, or whose ``type`` is not one of the variants below, are not events.

Payloads are read loosely: a nested field of an unexpected shape becomes None
(or is coerced to a string) instead of rejecting the whole event.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return str(value)
    return None


LooseStr = Annotated[str | None, BeforeValidator(_str_or_none)]


def _error_detail(value: Any) -> Any:
    # Any truthy non-object error (a bare string, say) still marks an error;
    # it becomes an unnamed detail so the reducer falls back to defaults.
    if isinstance(value, dict):
        return value
    return {} if value else None


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TextPart(_Payload):
    text: Annotated[str, BeforeValidator(lambda v: _str_or_none(v) or "")] = ""


class ToolState(_Payload):
    status: LooseStr = None
    input: Any = None
    output: Any = None


class ToolPart(_Payload):
    tool: LooseStr = None
    call_id: LooseStr = Field(default=None, alias="callID")
    state: Annotated[ToolState | None, BeforeValidator(_mapping_or_none)] = None


class ErrorData(_Payload):
    message: Any = None


class ErrorDetail(_Payload):
    name: LooseStr = None
    data: Annotated[ErrorData | None, BeforeValidator(_mapping_or_none)] = None


class StepStartEvent(_Payload):
    type: Literal["step_start"]


class TextEvent(_Payload):
    type: Literal["text"]
    part: Annotated[TextPart | None, BeforeValidator(_mapping_or_none)] = None


class ToolUseEvent(_Payload):
    type: Literal["tool_use"]
    part: Annotated[ToolPart | None, BeforeValidator(_mapping_or_none)] = None


class StepFinishEvent(_Payload):
    type: Literal["step_finish"]


class ErrorEvent(_Payload):
    type: Literal["error"]
    error: Annotated[ErrorDetail | None, BeforeValidator(_error_detail)] = None


StreamEvent = Annotated[
    StepStartEvent | TextEvent | ToolUseEvent | StepFinishEvent | ErrorEvent,
    Field(discriminator="type"),
]

STREAM_EVENT_ADAPTER: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)
