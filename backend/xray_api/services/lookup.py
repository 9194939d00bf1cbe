"""Run metadata lookups and publish the panel payload."""
from __future__ import annotations

import logging
from typing import Any

from ..stores.kv_store import PANEL_DATA_KEY, KeyValueStore
from .metadata_client import MetadataClient, MetadataLookupError

logger = logging.getLogger(__name__)

MEDIA_TYPES = {"movie": "movie", "episode": "tvShow"}


def build_panel_payload(message: dict[str, Any], record: Any) -> dict[str, Any]:
    """Tag the metadata record with the panel media type."""

    media_type = MEDIA_TYPES.get(message.get("kind", ""), "movie")
    if isinstance(record, dict):
        return {**record, "mediaType": media_type}
    return {"mediaType": media_type, "data": record}


class LookupService:
    """Query the metadata service for a dispatched title.

    Failures are contained here: they are logged and the panel keeps its
    previous payload until the next successful lookup.
    """

    def __init__(self, client: MetadataClient, store: KeyValueStore) -> None:
        self._client = client
        self._store = store

    def handle(self, message: dict[str, Any]) -> dict[str, Any] | None:
        try:
            record = self._client.lookup(message)
        except MetadataLookupError as exc:
            logger.warning("Lookup for %r failed: %s", message.get("title"), exc)
            return None

        payload = build_panel_payload(message, record)
        self._store.set(PANEL_DATA_KEY, payload)
        logger.info("Panel updated for %r (%s)", message.get("title"), payload["mediaType"])
        return payload
