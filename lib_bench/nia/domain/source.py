"""Indexing state of a Nia source as reported by the API."""

from pydantic import BaseModel

from lib_bench.nia.domain.target import NiaTarget

READY_STATUSES = frozenset({"indexed", "completed"})
PENDING_STATUSES = frozenset({"indexing", "queued", "processing"})


def is_ready(status: str) -> bool:
    return status in READY_STATUSES


def is_pending(status: str) -> bool:
    return status in PENDING_STATUSES


class SubmittedSource(BaseModel, frozen=True):
    """A target accepted by the API, with the id used to poll it."""

    target: NiaTarget
    source_id: str
    status: str


class NiaSetupReport(BaseModel, frozen=True):
    """Display names grouped by how the setup phase ended for them."""

    cached: list[str]
    indexed: list[str]
    failed: list[str]
    elapsed_seconds: float
