"""
Title watcher package for X-Ray.

Detects the title shown by the streaming player and classifies it into a
movie or an episode. The Playwright host and session live in ``page_host``
and ``session`` so importing the parser does not require a browser.
"""

from .models import Episode, Movie, ParsedTitle, RawTitleSample
from .observer import DocumentHost, TitleObserver, is_watch_url
from .parser import TitleParser, parse_title

__all__ = [
    "DocumentHost",
    "Episode",
    "Movie",
    "ParsedTitle",
    "RawTitleSample",
    "TitleObserver",
    "TitleParser",
    "is_watch_url",
    "parse_title",
]
