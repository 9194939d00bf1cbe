"""RQ task entrypoints executed by the lookup worker."""
from __future__ import annotations

from typing import Any

from ..db import create_engine_from_settings, init_database
from ..settings import XraySettings
from ..stores.kv_store import SqlKeyValueStore
from .lookup import LookupService
from .metadata_client import MetadataClient


def execute_lookup_job(
    *,
    message: dict[str, Any],
    settings: dict[str, Any],
) -> dict[str, Any] | None:
    """Background worker entrypoint for metadata lookups."""

    resolved_settings = XraySettings.model_validate(settings)
    engine = create_engine_from_settings(resolved_settings)
    try:
        init_database(engine)
        client = MetadataClient(
            resolved_settings.metadata_api_url,
            resolved_settings.metadata_api_key,
            timeout=resolved_settings.metadata_timeout,
        )
        service = LookupService(client, SqlKeyValueStore(engine))
        return service.handle(message)
    finally:
        engine.dispose()
