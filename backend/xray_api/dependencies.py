"""FastAPI dependencies for the X-Ray service."""
from fastapi import Depends, Request

from ..watcher.parser import TitleParser
from .services.dispatcher import TitleDispatcher
from .services.queue import LookupQueue
from .state import AppState
from .stores.kv_store import SqlKeyValueStore


def get_app_state(request: Request) -> AppState:
    """Resolve the shared application state from the FastAPI request."""
    return request.app.state.app_state


def get_store(app_state: AppState = Depends(get_app_state)) -> SqlKeyValueStore:
    """Return the key-value store dependency."""
    return app_state.store


def get_parser(app_state: AppState = Depends(get_app_state)) -> TitleParser:
    """Return the configured title parser."""
    return app_state.parser


def get_dispatcher(app_state: AppState = Depends(get_app_state)) -> TitleDispatcher:
    """Return the process-wide title dispatcher."""
    return app_state.dispatcher


def get_lookup_queue(app_state: AppState = Depends(get_app_state)) -> LookupQueue:
    """Return the lookup queue service."""
    return app_state.lookup_queue
