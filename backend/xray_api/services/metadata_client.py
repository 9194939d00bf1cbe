"""
HTTP client for the metadata service that enriches the panel.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import requests


class MetadataLookupError(RuntimeError):
    """Raised when the metadata service cannot produce a usable record."""


class MetadataClient:
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        timeout: float = 20.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def lookup(self, message: Dict[str, Any]) -> Any:
        """Fetch the enrichment record for a movie or episode lookup message."""

        if message.get("kind") == "episode":
            params: Dict[str, Any] = {
                "title": message["title"],
                "episodeTitle": message.get("episodeTitle", ""),
                "episodeNumber": message.get("episodeNumber"),
            }
            if message.get("seasonNumber") is not None:
                params["seasonNumber"] = message["seasonNumber"]
            return self._get("/episode", params)
        return self._get("/movie", {"title": message["title"]})

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise MetadataLookupError(f"Metadata request to {url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise MetadataLookupError(f"Metadata service returned HTTP {resp.status_code} for {url}")

        try:
            return resp.json()
        except ValueError as exc:
            raise MetadataLookupError(f"Metadata service returned malformed JSON for {url}") from exc
