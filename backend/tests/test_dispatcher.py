"""Tests for title dedup, routing, and metadata lookups."""
from __future__ import annotations

import itertools
import sys
from pathlib import Path
from typing import Any

import pytest
import requests
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.watcher.models import Episode, Movie, RawTitleSample  # noqa: E402
from backend.watcher.parser import TitleParser  # noqa: E402
from backend.xray_api.db import create_engine_from_settings, init_database  # noqa: E402
from backend.xray_api.models import KeyValueRecord  # noqa: E402
from backend.xray_api.services.dispatcher import TitleDispatcher, to_lookup_message  # noqa: E402
from backend.xray_api.services.lookup import LookupService, build_panel_payload  # noqa: E402
from backend.xray_api.services.metadata_client import (  # noqa: E402
    MetadataClient,
    MetadataLookupError,
)
from backend.xray_api.settings import XraySettings  # noqa: E402
from backend.xray_api.stores.kv_store import (  # noqa: E402
    LAST_SEEN_KEY,
    PANEL_DATA_KEY,
    SqlKeyValueStore,
)


@pytest.fixture()
def store(tmp_path: Path) -> SqlKeyValueStore:
    settings = XraySettings(database_url=f"sqlite:///{tmp_path / 'xray.db'}", redis_url="fakeredis://")
    engine = create_engine_from_settings(settings)
    init_database(engine)
    return SqlKeyValueStore(engine)


class RecordingEmitter:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    def __call__(self, message: dict[str, Any]) -> str:
        self.messages.append(message)
        return f"job-{len(self.messages)}"


def _sample(text: str) -> RawTitleSample:
    return RawTitleSample(text=text, page_url="https://www.netflix.com/watch/1")


def test_store_round_trip_and_overwrite(store: SqlKeyValueStore) -> None:
    assert store.get("missing") is None

    store.set("panelData", {"mediaType": "movie"})
    store.set("panelData", {"mediaType": "tvShow", "cast": []})

    assert store.get("panelData") == {"mediaType": "tvShow", "cast": []}


def test_store_timestamps_are_timezone_aware(store: SqlKeyValueStore) -> None:
    assert KeyValueRecord(key="panelData", value={}).updated_at.tzinfo is not None

    store.set(LAST_SEEN_KEY, {"title": "Show A"})
    store.set(LAST_SEEN_KEY, {"title": "Show B"})

    assert store.get(LAST_SEEN_KEY) == {"title": "Show B"}


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_samples_are_rejected(text: str) -> None:
    with pytest.raises(ValidationError):
        RawTitleSample(text=text)


def test_sample_text_keeps_surrounding_whitespace() -> None:
    assert RawTitleSample(text=" Margin Call ").text == " Margin Call "


def test_repeated_samples_collapse(store: SqlKeyValueStore) -> None:
    emitter = RecordingEmitter()
    dispatcher = TitleDispatcher(store, emitter)

    texts = ["Show A", "Show A", "Show B", "Show A"]
    results = [dispatcher.submit(_sample(text)) for text in texts]

    assert [result is not None for result in results] == [True, False, True, True]
    assert [message["title"] for message in emitter.messages] == ["Show A", "Show B", "Show A"]


@pytest.mark.parametrize(
    "texts",
    [
        [],
        ["A"],
        ["A", "A", "A"],
        ["A", "B", "A", "B"],
        ["A", "A", "B", "B", "B", "C", "A", "A"],
        ["Margin Call", " Margin Call", "Margin Call "],
    ],
)
def test_dispatch_count_matches_runs_of_distinct_values(store: SqlKeyValueStore, texts: list[str]) -> None:
    emitter = RecordingEmitter()
    dispatcher = TitleDispatcher(store, emitter)

    for text in texts:
        dispatcher.submit(_sample(text))

    runs = [key for key, _ in itertools.groupby(texts)]
    assert len(emitter.messages) == len(runs)


def test_whitespace_variants_dispatch_again(store: SqlKeyValueStore) -> None:
    emitter = RecordingEmitter()
    dispatcher = TitleDispatcher(store, emitter)

    dispatcher.submit(_sample("Margin Call"))
    dispatch = dispatcher.submit(_sample("Margin Call "))

    assert dispatch is not None
    assert len(emitter.messages) == 2
    assert emitter.messages[0] == emitter.messages[1] == {"kind": "movie", "title": "Margin Call"}


def test_new_title_is_persisted_before_emit(store: SqlKeyValueStore) -> None:
    seen_in_store: list[Any] = []

    def emit(message: dict[str, Any]) -> None:
        seen_in_store.append(store.get(LAST_SEEN_KEY))
        return None

    dispatcher = TitleDispatcher(store, emit)
    dispatch = dispatcher.submit(_sample("Band of BrothersE7The Breaking Point"))

    assert dispatch is not None
    assert dispatch.job_id is None
    assert seen_in_store[0]["title"] == "Band of BrothersE7The Breaking Point"
    assert seen_in_store[0]["url"] == "https://www.netflix.com/watch/1"
    assert dispatcher.last_seen.raw_text == "Band of BrothersE7The Breaking Point"


def test_last_seen_title_survives_restart(store: SqlKeyValueStore) -> None:
    first = RecordingEmitter()
    TitleDispatcher(store, first).submit(_sample("Show A"))

    second = RecordingEmitter()
    restarted = TitleDispatcher(store, second)

    assert restarted.last_seen.raw_text == "Show A"
    assert restarted.submit(_sample("Show A")) is None
    assert restarted.submit(_sample("Show B")) is not None
    assert [message["title"] for message in second.messages] == ["Show B"]


def test_episode_dispatch_carries_parsed_fields(store: SqlKeyValueStore) -> None:
    emitter = RecordingEmitter()
    dispatcher = TitleDispatcher(store, emitter)

    dispatch = dispatcher.submit(_sample("Band of BrothersE7The Breaking Point"))

    assert dispatch is not None
    assert dispatch.job_id == "job-1"
    assert isinstance(dispatch.parsed, Episode)
    assert emitter.messages == [
        {
            "kind": "episode",
            "title": "Band of Brothers",
            "episodeNumber": 7,
            "episodeTitle": "The Breaking Point",
        }
    ]


def test_dispatcher_uses_configured_parser(store: SqlKeyValueStore) -> None:
    emitter = RecordingEmitter()
    dispatcher = TitleDispatcher(store, emitter, TitleParser(prefer_season_markers=True))

    dispatcher.submit(_sample("The CrownS2E3Lisbon"))

    assert emitter.messages == [
        {
            "kind": "episode",
            "title": "The Crown",
            "episodeNumber": 3,
            "episodeTitle": "Lisbon",
            "seasonNumber": 2,
        }
    ]


def test_lookup_messages_have_exact_shapes() -> None:
    assert to_lookup_message(Movie(title="Margin Call")) == {"kind": "movie", "title": "Margin Call"}
    assert to_lookup_message(
        Episode(series_title="Dark", episode_number=3, episode_title="Ghosts")
    ) == {"kind": "episode", "title": "Dark", "episodeNumber": 3, "episodeTitle": "Ghosts"}


def test_panel_payload_tags_media_type() -> None:
    movie = build_panel_payload({"kind": "movie", "title": "Margin Call"}, {"cast": ["Zachary Quinto"]})
    episode = build_panel_payload({"kind": "episode", "title": "Dark"}, {"mediaType": "ignored"})
    listing = build_panel_payload({"kind": "movie", "title": "Margin Call"}, [1, 2])

    assert movie == {"cast": ["Zachary Quinto"], "mediaType": "movie"}
    assert episode == {"mediaType": "tvShow"}
    assert listing == {"mediaType": "movie", "data": [1, 2]}


class StubResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, malformed: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._malformed = malformed

    def json(self) -> Any:
        if self._malformed:
            raise ValueError("Expecting value")
        return self._payload


class StubSession:
    def __init__(self, response: StubResponse | None = None, error: Exception | None = None) -> None:
        self.response = response or StubResponse(payload={})
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> StubResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def test_metadata_client_builds_movie_and_episode_requests() -> None:
    session = StubSession(StubResponse(payload={"cast": []}))
    client = MetadataClient("http://metadata.local/", "secret", timeout=5, session=session)  # type: ignore[arg-type]

    client.lookup({"kind": "movie", "title": "Margin Call"})
    client.lookup(
        {"kind": "episode", "title": "Dark", "episodeNumber": 3, "episodeTitle": "Ghosts", "seasonNumber": 1}
    )

    movie_call, episode_call = session.calls
    assert movie_call["url"] == "http://metadata.local/movie"
    assert movie_call["params"] == {"title": "Margin Call"}
    assert movie_call["headers"]["Authorization"] == "Bearer secret"
    assert movie_call["timeout"] == 5
    assert episode_call["url"] == "http://metadata.local/episode"
    assert episode_call["params"] == {
        "title": "Dark",
        "episodeTitle": "Ghosts",
        "episodeNumber": 3,
        "seasonNumber": 1,
    }


@pytest.mark.parametrize(
    "session",
    [
        StubSession(error=requests.ConnectionError("refused")),
        StubSession(StubResponse(status_code=503)),
        StubSession(StubResponse(malformed=True)),
    ],
)
def test_metadata_client_failures_raise_lookup_error(session: StubSession) -> None:
    client = MetadataClient("http://metadata.local", session=session)  # type: ignore[arg-type]

    with pytest.raises(MetadataLookupError):
        client.lookup({"kind": "movie", "title": "Margin Call"})


def test_lookup_service_persists_panel_payload(store: SqlKeyValueStore) -> None:
    session = StubSession(StubResponse(payload={"cast": [{"name": "Paul Bettany"}]}))
    service = LookupService(MetadataClient("http://metadata.local", session=session), store)  # type: ignore[arg-type]

    payload = service.handle({"kind": "episode", "title": "Band of Brothers", "episodeNumber": 7, "episodeTitle": "The Breaking Point"})

    assert payload == {"cast": [{"name": "Paul Bettany"}], "mediaType": "tvShow"}
    assert store.get(PANEL_DATA_KEY) == payload


def test_lookup_failure_keeps_previous_panel(store: SqlKeyValueStore, caplog: pytest.LogCaptureFixture) -> None:
    store.set(PANEL_DATA_KEY, {"mediaType": "movie", "title": "Margin Call"})
    session = StubSession(error=requests.Timeout("slow"))
    service = LookupService(MetadataClient("http://metadata.local", session=session), store)  # type: ignore[arg-type]

    assert service.handle({"kind": "movie", "title": "Dark"}) is None
    assert store.get(PANEL_DATA_KEY) == {"mediaType": "movie", "title": "Margin Call"}
    assert "Lookup for 'Dark' failed" in caplog.text
