"""
Classify raw player titles into movies or episodes.

The player renders episodes as a single text node run such as
``Band of BrothersE7The Breaking Point``: the series name, an ``E<digits>``
marker and the episode name with no delimiter. Anything without a usable
marker is treated as a movie.
"""
from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple

from .models import Episode, Movie, ParsedTitle

BARE_MARKER = re.compile(
    r"^(?P<series>.*?)[^A-Za-z0-9]?E(?P<episode>[0-9]+)(?P<rest>.*)$",
    re.IGNORECASE | re.DOTALL,
)
SEASON_MARKER = re.compile(
    r"^(?P<series>.*?)[^A-Za-z0-9]?S(?P<season>[0-9]+)E(?P<episode>[0-9]+)(?P<rest>.*)$",
    re.IGNORECASE | re.DOTALL,
)
SEPARATOR_MARKER = re.compile(
    r"^(?P<series>.+?)\s*[:\-]\s*E(?P<episode>[0-9]+)(?P<rest>.*)$",
    re.IGNORECASE | re.DOTALL,
)

# Legacy first-match-wins order. BARE_MARKER matches everything the other two
# would, so they only take effect with prefer_season_markers.
DEFAULT_ORDER: Tuple[Pattern[str], ...] = (BARE_MARKER, SEASON_MARKER, SEPARATOR_MARKER)
SEASON_FIRST_ORDER: Tuple[Pattern[str], ...] = (SEASON_MARKER, SEPARATOR_MARKER, BARE_MARKER)


class TitleParser:
    """Deterministic raw title classifier.

    ``prefer_season_markers`` evaluates the season and separator patterns
    before the bare marker so ``ShowS2E3Name`` yields season 2 and series
    ``Show``. It is off by default to keep classification stable for stored
    keys.
    """

    def __init__(self, prefer_season_markers: bool = False) -> None:
        self.prefer_season_markers = prefer_season_markers
        self._patterns = SEASON_FIRST_ORDER if prefer_season_markers else DEFAULT_ORDER

    def parse(self, raw_title: str) -> ParsedTitle:
        text = (raw_title or "").strip()
        for pattern in self._patterns:
            episode = self._match(pattern, text)
            if episode is not None:
                return episode
        return Movie(title=text)

    @staticmethod
    def _match(pattern: Pattern[str], text: str) -> Optional[Episode]:
        match = pattern.fullmatch(text)
        if not match:
            return None

        series = match.group("series").strip()
        try:
            number = int(match.group("episode"), 10)
            season: Optional[int] = None
            if "season" in pattern.groupindex:
                season = int(match.group("season"), 10) or None
        except ValueError:
            # Digit runs beyond the interpreter's int conversion limit.
            return None
        if not series or number < 1:
            return None

        return Episode(
            series_title=series,
            episode_number=number,
            episode_title=match.group("rest").strip(),
            season_number=season,
        )


_default_parser = TitleParser()


def parse_title(raw_title: str) -> ParsedTitle:
    """Parse ``raw_title`` with the legacy pattern order."""

    return _default_parser.parse(raw_title)
