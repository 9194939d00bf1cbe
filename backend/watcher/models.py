"""Pydantic models shared by the title watcher and the X-Ray service."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Movie(BaseModel):
    """A title that carries no episode marker."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["movie"] = "movie"
    title: str = Field(..., description="Trimmed movie title.")


class Episode(BaseModel):
    """A single episode of a series decomposed from the raw title."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["episode"] = "episode"
    series_title: str = Field(..., min_length=1, description="Trimmed series name.")
    episode_number: int = Field(..., ge=1)
    episode_title: str = Field(default="", description="Trimmed episode name, may be empty.")
    season_number: int | None = Field(
        default=None,
        ge=1,
        description="Season number when the raw text encodes one and the season pattern won.",
    )


ParsedTitle = Annotated[Union[Movie, Episode], Field(discriminator="kind")]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RawTitleSample(BaseModel):
    """Title text observed on the page at a given moment."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1, description="Trimmed text content of the title element.")
    observed_at: datetime = Field(default_factory=_utcnow, alias="observedAt")
    page_url: str = Field(default="", alias="pageUrl")

    @field_validator("text")
    @classmethod
    def _reject_blank_text(cls, value: str) -> str:
        # Raw text is kept as is; dedup compares it byte for byte.
        if not value.strip():
            raise ValueError("title text must not be blank")
        return value
