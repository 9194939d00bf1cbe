"""Entry point for running the X-Ray lookup worker."""
from __future__ import annotations

import logging
import os

from rq import Worker, SimpleWorker

from backend.xray_api.services.queue import LookupQueue
from backend.xray_api.settings import XraySettings


def main() -> None:
    """Start an RQ worker connected to the configured lookup queue."""

    settings = XraySettings()
    lookup_queue = LookupQueue(settings)

    # Use SimpleWorker on Windows to avoid fork issues
    worker_class = SimpleWorker if os.name == 'nt' else Worker
    worker = worker_class(
        [lookup_queue.queue],
        connection=lookup_queue.connection,
        name=settings.queue_worker_name,
    )

    logging.basicConfig(level=logging.INFO)
    worker.work(with_scheduler=False)


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    main()
