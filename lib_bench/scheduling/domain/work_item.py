"""WorkItem — one scheduled (task, condition, repetition) unit."""

from pydantic import BaseModel, Field


class WorkItem(BaseModel, frozen=True):
    task_id: str = Field(min_length=1)
    condition: str = Field(min_length=1)
    repetition_index: int = Field(ge=0)
