"""Database-backed key-value store for X-Ray state."""
from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Any, Protocol

from sqlmodel import Session

from ..models import KeyValueRecord

LAST_SEEN_KEY = "currentVideo"
PANEL_DATA_KEY = "panelData"


class KeyValueStore(Protocol):
    """Minimal last-write-wins persistence contract."""

    def get(self, key: str) -> dict[str, Any] | None:
        ...

    def set(self, key: str, value: dict[str, Any]) -> None:
        ...


class SqlKeyValueStore:
    """Thread-safe key-value interface over the ``xray_kv`` table."""

    def __init__(self, engine) -> None:
        self._engine = engine
        self._lock = Lock()

    def get(self, key: str) -> dict[str, Any] | None:
        """Return the stored value for ``key`` or ``None`` when absent."""

        with Session(self._engine) as session:
            record = session.get(KeyValueRecord, key)
            if record is None:
                return None
            return record.value

    def set(self, key: str, value: dict[str, Any]) -> None:
        """Insert or overwrite ``key``."""

        with self._lock, Session(self._engine) as session:
            record = session.get(KeyValueRecord, key)
            if record is None:
                record = KeyValueRecord(key=key, value=value)
            else:
                record.value = value
                record.updated_at = datetime.now(timezone.utc)
            session.add(record)
            session.commit()
