"""Ship observed titles to the X-Ray service."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx

from .models import RawTitleSample

logger = logging.getLogger(__name__)

SAMPLES_PATH = "/titles/samples"


class SampleForwarder:
    """Title handler posting a :class:`RawTitleSample` per notification.

    Delivery is fire and forget: HTTP failures are logged and dropped so the
    observer keeps running.
    """

    def __init__(
        self,
        client: httpx.Client,
        page_url: Callable[[], str],
    ) -> None:
        self.client = client
        self.page_url = page_url
        self.sent = 0
        self.failed = 0

    def __call__(self, title: str) -> None:
        self.forward(title)

    def forward(self, title: str, observed_at: Optional[datetime] = None) -> bool:
        sample = RawTitleSample(
            text=title,
            observed_at=observed_at or datetime.now(timezone.utc),
            page_url=self.page_url(),
        )
        try:
            response = self.client.post(SAMPLES_PATH, json=sample.model_dump(mode="json", by_alias=True))
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            self.failed += 1
            logger.warning("Failed to forward title %r: %s", title, exc)
            return False

        self.sent += 1
        if body.get("dispatched"):
            logger.info("New title dispatched: %s", title)
        else:
            logger.debug("Title already seen: %s", title)
        return True
