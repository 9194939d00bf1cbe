"""Service layer for dispatching titles and running lookups."""

from .dispatcher import Dispatch, TitleDispatcher, to_lookup_message
from .lookup import LookupService, build_panel_payload
from .metadata_client import MetadataClient, MetadataLookupError
from .queue import LookupQueue, LookupQueueError

__all__ = [
    "Dispatch",
    "LookupQueue",
    "LookupQueueError",
    "LookupService",
    "MetadataClient",
    "MetadataLookupError",
    "TitleDispatcher",
    "build_panel_payload",
    "to_lookup_message",
]
