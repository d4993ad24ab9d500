"""Nia pre-indexing configuration model."""

from pydantic import BaseModel, Field

DEFAULT_NIA_BASE_URL = "https://apigcp.trynia.ai/v2"


class NiaConfig(BaseModel, frozen=True):
    """How sources are indexed before a run that includes a Nia condition.

    ``conditions`` names the conditions whose agents query Nia; the setup
    phase only runs when one of them is selected.
    """

    base_url: str = Field(default=DEFAULT_NIA_BASE_URL, min_length=1)
    conditions: list[str] = Field(default_factory=lambda: ["nia"])
    max_wait_seconds: float = Field(default=600.0, gt=0)
    poll_interval_seconds: float = Field(default=15.0, gt=0)
    parallel: int = Field(default=3, ge=1)
