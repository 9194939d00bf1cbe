"""
Title change detection for single page video players.

The player never reloads during in-app navigation, so the observer relies on
structural mutation batches delivered by a :class:`DocumentHost`. One watch
tracks the navigation URL on every batch; a second one, enabled only on watch
pages, reads the title element and notifies handlers.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, List, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

DEFAULT_WATCH_URL_PATTERN = "netflix.com/watch"
DEFAULT_TITLE_SELECTOR = '[data-uia="video-title"]'

MutationBatch = Sequence[Any]
MutationCallback = Callable[[MutationBatch], None]
TitleHandler = Callable[[str], None]


class DocumentHost(Protocol):
    """The subset of a live document the observer depends on."""

    @property
    def url(self) -> str:
        ...

    def query_text(self, selector: str) -> Optional[str]:
        """Return the text content of the element matching ``selector``."""

    def observe(self, callback: MutationCallback) -> Hashable:
        """Register ``callback`` for child-list mutations of the whole document."""

    def disconnect(self, handle: Hashable) -> None:
        """Release a registration returned by :meth:`observe`."""


def is_watch_url(url: str, pattern: str = DEFAULT_WATCH_URL_PATTERN) -> bool:
    return bool(url) and pattern in url


class TitleObserver:
    """Watches a document and reports the currently displayed title."""

    def __init__(
        self,
        host: DocumentHost,
        *,
        watch_url_pattern: str = DEFAULT_WATCH_URL_PATTERN,
        title_selector: str = DEFAULT_TITLE_SELECTOR,
    ) -> None:
        self.host = host
        self.watch_url_pattern = watch_url_pattern
        self.title_selector = title_selector
        self._handlers: List[TitleHandler] = []
        self._url_handle: Optional[Hashable] = None
        self._title_handle: Optional[Hashable] = None
        self._last_url: str = ""

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    @property
    def started(self) -> bool:
        return self._url_handle is not None

    @property
    def watching_titles(self) -> bool:
        return self._title_handle is not None

    def start(self) -> None:
        if self.started:
            return
        self._last_url = self.host.url
        self._url_handle = self.host.observe(self._handle_url_batch)
        if self._on_watch_page():
            self._enable_title_watch()
        logger.debug("Title observer started on %s", self._last_url)

    def stop(self) -> None:
        if self._url_handle is not None:
            self.host.disconnect(self._url_handle)
            self._url_handle = None
        self._disable_title_watch()

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #

    def on_title_change(self, handler: TitleHandler) -> None:
        self._handlers.append(handler)

    def off_title_change(self, handler: TitleHandler) -> None:
        self._handlers = [registered for registered in self._handlers if registered != handler]

    # ------------------------------------------------------------------ #
    # Watches
    # ------------------------------------------------------------------ #

    def _on_watch_page(self) -> bool:
        return is_watch_url(self.host.url, self.watch_url_pattern)

    def _enable_title_watch(self) -> None:
        if self._title_handle is None:
            self._title_handle = self.host.observe(self._handle_title_batch)

    def _disable_title_watch(self) -> None:
        if self._title_handle is not None:
            self.host.disconnect(self._title_handle)
            self._title_handle = None

    def _handle_url_batch(self, batch: MutationBatch) -> None:
        current = self.host.url
        if current == self._last_url:
            return
        self._last_url = current
        if is_watch_url(current, self.watch_url_pattern):
            logger.debug("Entered watch page %s", current)
            self._enable_title_watch()
        else:
            logger.debug("Left watch page, now on %s", current)
            self._disable_title_watch()

    def _handle_title_batch(self, batch: MutationBatch) -> None:
        # Batches queued before the URL watch disabled us still arrive.
        if not self._on_watch_page():
            return

        text = self.host.query_text(self.title_selector)
        if not text:
            return
        title = text.strip()
        if title:
            self._notify(title)

    def _notify(self, title: str) -> None:
        for handler in list(self._handlers):
            try:
                handler(title)
            except Exception:
                logger.exception("Title handler %r failed for %r", handler, title)
