"""
Run a title observer inside a real browser.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .observer import (
    DEFAULT_TITLE_SELECTOR,
    DEFAULT_WATCH_URL_PATTERN,
    DocumentHost,
    TitleHandler,
    TitleObserver,
)
from .page_host import PlaywrightDocumentHost

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


def watch_page(
    url: str,
    make_handlers: Callable[[DocumentHost], Iterable[TitleHandler]],
    *,
    headless: bool = False,
    profile_dir: Optional[str] = None,
    duration: Optional[float] = None,
    poll_interval_ms: int = 500,
    watch_url_pattern: str = DEFAULT_WATCH_URL_PATTERN,
    title_selector: str = DEFAULT_TITLE_SELECTOR,
) -> None:
    """Open ``url`` and report title changes until the page closes.

    ``make_handlers`` receives the page host once it exists and returns the
    title handlers to register, so handlers can read the live page URL.

    A persistent ``profile_dir`` keeps the streaming login between runs.
    ``duration`` bounds the session in seconds; ``None`` runs until the page
    is closed or the process is interrupted.
    """

    with sync_playwright() as p:
        if profile_dir:
            Path(profile_dir).expanduser().mkdir(parents=True, exist_ok=True)
            context = p.chromium.launch_persistent_context(
                str(Path(profile_dir).expanduser()),
                headless=headless,
                user_agent=DEFAULT_USER_AGENT,
            )
            browser = None
        else:
            browser = p.chromium.launch(headless=headless)
            context = browser.new_context(user_agent=DEFAULT_USER_AGENT)

        page = context.pages[0] if context.pages else context.new_page()
        host = PlaywrightDocumentHost(page)
        host.install()

        observer = TitleObserver(
            host,
            watch_url_pattern=watch_url_pattern,
            title_selector=title_selector,
        )
        for handler in make_handlers(host):
            observer.on_title_change(handler)

        deadline = time.monotonic() + duration if duration else None
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=60000)
            observer.start()
            logger.info("Watching %s", url)
            while not page.is_closed():
                if deadline is not None and time.monotonic() >= deadline:
                    break
                # Binding calls are delivered while the sync API waits.
                page.wait_for_timeout(poll_interval_ms)
        except KeyboardInterrupt:
            logger.info("Interrupted, closing browser")
        except PlaywrightError as exc:
            if not page.is_closed():
                raise
            logger.debug("Page closed: %s", exc)
        finally:
            observer.stop()
            context.close()
            if browser is not None:
                browser.close()
