"""Shared state container for the X-Ray service."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from ..watcher.parser import TitleParser
from .db import create_engine_from_settings, init_database
from .services.dispatcher import TitleDispatcher
from .services.queue import LookupQueue
from .settings import XraySettings
from .stores.kv_store import SqlKeyValueStore


@dataclass(slots=True)
class AppState:
    """Encapsulates the long-lived objects shared across routers."""

    settings: XraySettings
    engine: Engine
    store: SqlKeyValueStore
    parser: TitleParser
    lookup_queue: LookupQueue
    dispatcher: TitleDispatcher

    def __init__(self, settings: XraySettings) -> None:
        self.settings = settings
        self.engine = create_engine_from_settings(settings)
        init_database(self.engine)
        self.store = SqlKeyValueStore(self.engine)
        self.parser = TitleParser(prefer_season_markers=settings.prefer_season_markers)
        self.lookup_queue = LookupQueue(settings)
        self.dispatcher = TitleDispatcher(self.store, self.lookup_queue.emit, self.parser)
