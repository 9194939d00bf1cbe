"""Redis-backed lookup queue connecting the dispatcher to the worker."""
from __future__ import annotations

import logging
from typing import Any

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue

try:  # pragma: no cover - optional dependency for test environments
    import fakeredis
except ModuleNotFoundError:  # pragma: no cover - runtime path without fakeredis
    fakeredis = None  # type: ignore[assignment]

from ..settings import XraySettings
from .tasks import execute_lookup_job

logger = logging.getLogger(__name__)


class LookupQueueError(RuntimeError):
    """Raised when the queue cannot accept a lookup."""


class LookupQueue:
    """Encapsulates the Redis queue connection and enqueue workflow."""

    def __init__(self, settings: XraySettings) -> None:
        self._settings = settings
        self._connection = self._create_connection(settings)
        self._queue = Queue(settings.redis_queue_name, connection=self._connection)

    @staticmethod
    def _create_connection(settings: XraySettings) -> Redis:
        """Instantiate a Redis connection, supporting fakeredis for tests."""

        url = settings.redis_url
        if url.startswith("fakeredis://"):
            if fakeredis is None:  # pragma: no cover - safety branch
                msg = "fakeredis is required for fakeredis:// URLs"
                raise LookupQueueError(msg)
            return fakeredis.FakeRedis()  # type: ignore[return-value]
        return Redis.from_url(url)

    @property
    def queue(self) -> Queue:
        """Expose the underlying RQ queue for workers and diagnostics."""

        return self._queue

    @property
    def connection(self) -> Redis:
        """Return the Redis connection used by the queue."""

        return self._connection

    def ping(self) -> bool:
        """Check whether the queue backend is reachable."""

        try:
            return bool(self._connection.ping())
        except RedisError:
            return False

    def enqueue(self, message: dict[str, Any]) -> str:
        """Enqueue a lookup for the worker and return the RQ job id."""

        try:
            job = self._queue.enqueue(
                execute_lookup_job,
                kwargs={
                    "message": message,
                    "settings": self._settings.model_dump(),
                },
            )
        except RedisError as exc:
            raise LookupQueueError("Unable to enqueue lookup") from exc
        return job.id

    def emit(self, message: dict[str, Any]) -> str | None:
        """Fire-and-forget variant of :meth:`enqueue` used by the dispatcher."""

        try:
            return self.enqueue(message)
        except LookupQueueError as exc:
            logger.error("Dropping lookup for %r: %s", message.get("title"), exc)
            return None
