"""
Playwright-backed document host.

An init script installs a ``MutationObserver`` on ``document.documentElement``
in every frame load and ships each batch to Python through an exposed
binding. Registered callbacks receive the batch in registration order.
"""
from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Hashable, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from .observer import MutationBatch, MutationCallback

logger = logging.getLogger(__name__)

BINDING_NAME = "__xrayMutationBatch"

MUTATION_BRIDGE_SCRIPT = """
(() => {
    if (window.__xrayBridgeInstalled || window.top !== window) {
        return;
    }
    window.__xrayBridgeInstalled = true;

    const install = () => {
        const observer = new MutationObserver((mutations) => {
            const batch = mutations.map((mutation) => ({
                type: mutation.type,
                target: mutation.target && mutation.target.nodeName,
                added: mutation.addedNodes.length,
                removed: mutation.removedNodes.length,
            }));
            window.%(binding)s(batch).catch(() => {});
        });
        observer.observe(document.documentElement, { childList: true, subtree: true });
    };

    if (document.documentElement) {
        install();
    } else {
        document.addEventListener('DOMContentLoaded', install, { once: true });
    }
})();
""" % {"binding": BINDING_NAME}


class PlaywrightDocumentHost:
    """Expose a Playwright page through the observer's host contract."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self._callbacks: Dict[int, MutationCallback] = {}
        self._ids = itertools.count(1)
        self._installed = False

    def install(self) -> None:
        """Register the binding and init script; call before navigating."""

        if self._installed:
            return
        self.page.expose_binding(BINDING_NAME, self._on_batch)
        self.page.add_init_script(MUTATION_BRIDGE_SCRIPT)
        self._installed = True

    # ------------------------------------------------------------------ #
    # DocumentHost
    # ------------------------------------------------------------------ #

    @property
    def url(self) -> str:
        return self.page.url

    def query_text(self, selector: str) -> Optional[str]:
        try:
            element = self.page.query_selector(selector)
            if element is None:
                return None
            return element.text_content()
        except PlaywrightError as exc:
            # The element can be detached between the query and the read.
            logger.debug("Title query failed: %s", exc)
            return None

    def observe(self, callback: MutationCallback) -> Hashable:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def disconnect(self, handle: Hashable) -> None:
        self._callbacks.pop(handle, None)  # type: ignore[arg-type]

    # ------------------------------------------------------------------ #
    # Binding
    # ------------------------------------------------------------------ #

    def _on_batch(self, source: Dict[str, Any], batch: List[Dict[str, Any]]) -> None:
        self.dispatch(batch)

    def dispatch(self, batch: MutationBatch) -> None:
        # Snapshot: callbacks enabled while handling this batch start with the next one.
        for callback in list(self._callbacks.values()):
            callback(batch)
