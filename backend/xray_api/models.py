"""Database models for the X-Ray service."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, JSON
from sqlmodel import Field, SQLModel


class KeyValueRecord(SQLModel, table=True):
    """Single key-value entry holding a JSON object."""

    __tablename__ = "xray_kv"

    key: str = Field(primary_key=True, index=True)
    value: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
