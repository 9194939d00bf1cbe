"""Pydantic models exposed by the X-Ray service."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class QueueHealthStatus(BaseModel):
    """Represents Redis queue connectivity status."""

    status: Literal["ok", "error"] = Field(default="ok")
    detail: str | None = Field(
        default=None, description="Optional diagnostic message when the queue is unavailable."
    )


class HealthStatus(BaseModel):
    """Service health payload."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(default="0.1.0", description="Semantic version of the API service.")
    queue: QueueHealthStatus = Field(
        default_factory=QueueHealthStatus,
        description="Health information for the lookup queue.",
    )


class LastSeenTitle(BaseModel):
    """Raw title that most recently triggered a dispatch."""

    model_config = ConfigDict(populate_by_name=True)

    raw_text: str = Field(default="", alias="title")
    observed_at: datetime | None = Field(default=None, alias="timestamp")
    page_url: str | None = Field(default=None, alias="url")


class ParseRequest(BaseModel):
    """Payload accepted by the parse endpoint."""

    text: str = Field(..., description="Raw title text as displayed by the player.")


class SampleDispatchResponse(BaseModel):
    """Outcome of submitting a raw title sample."""

    dispatched: bool = Field(description="Whether the sample differed from the last seen title.")
    message: dict[str, Any] | None = Field(
        default=None, description="Outbound lookup message emitted for a new title."
    )
    job_id: str | None = Field(
        default=None, description="Identifier of the enqueued lookup job, when one was queued."
    )
