"""Deduplicate observed titles and route new ones to the lookup stage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable

from ...watcher.models import Episode, ParsedTitle, RawTitleSample
from ...watcher.parser import TitleParser
from ..schemas import LastSeenTitle
from ..stores.kv_store import LAST_SEEN_KEY, KeyValueStore

logger = logging.getLogger(__name__)

LookupEmitter = Callable[[dict[str, Any]], str | None]


def to_lookup_message(parsed: ParsedTitle) -> dict[str, Any]:
    """Convert a parsed title into the outbound lookup message."""

    if isinstance(parsed, Episode):
        message: dict[str, Any] = {
            "kind": "episode",
            "title": parsed.series_title,
            "episodeNumber": parsed.episode_number,
            "episodeTitle": parsed.episode_title,
        }
        if parsed.season_number is not None:
            message["seasonNumber"] = parsed.season_number
        return message
    return {"kind": "movie", "title": parsed.title}


@dataclass(slots=True)
class Dispatch:
    """A dispatched title change."""

    message: dict[str, Any]
    parsed: ParsedTitle
    job_id: str | None = None


class TitleDispatcher:
    """Acts exactly once per distinct consecutive raw title.

    The comparison is on the raw string, so whitespace variants of the same
    title dispatch again. The last seen title is loaded from the store once,
    when the dispatcher is created, and is written back on every change.
    """

    def __init__(
        self,
        store: KeyValueStore,
        emit: LookupEmitter,
        parser: TitleParser | None = None,
    ) -> None:
        self._store = store
        self._emit = emit
        self._parser = parser or TitleParser()
        self._lock = Lock()
        stored = store.get(LAST_SEEN_KEY)
        self._last_seen = LastSeenTitle.model_validate(stored) if stored else LastSeenTitle()

    @property
    def last_seen(self) -> LastSeenTitle:
        return self._last_seen

    def submit(self, sample: RawTitleSample) -> Dispatch | None:
        """Dispatch ``sample`` unless it repeats the last seen raw text."""

        with self._lock:
            if sample.text == self._last_seen.raw_text:
                logger.debug("Ignoring repeated title %r", sample.text)
                return None

            self._last_seen = LastSeenTitle(
                raw_text=sample.text,
                observed_at=sample.observed_at,
                page_url=sample.page_url,
            )
            self._store.set(LAST_SEEN_KEY, self._last_seen.model_dump(mode="json", by_alias=True))

            parsed = self._parser.parse(sample.text)
            message = to_lookup_message(parsed)
            logger.info("New title %r dispatched as %s", sample.text, message["kind"])
            job_id = self._emit(message)
            return Dispatch(message=message, parsed=parsed, job_id=job_id)
