"""Runtime configuration for the X-Ray service."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..watcher.observer import DEFAULT_TITLE_SELECTOR, DEFAULT_WATCH_URL_PATTERN
from .utils.paths import default_browser_profile_dir


class XraySettings(BaseSettings):
    """Environment-aware settings shared by the API, worker, and CLI watcher."""

    database_url: str = Field(
        default="sqlite:///./data/xray.db",
        description="Connection URL for the key-value store database.",
    )
    database_echo: bool = Field(
        default=False, description="Enable SQL echo for debugging queries."
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL for the Redis-backed lookup queue.",
    )
    redis_queue_name: str = Field(
        default="xray-lookups",
        description="RQ queue name used for metadata lookups.",
    )
    queue_worker_name: str = Field(
        default="xray-worker",
        description="Identifier used by the lookup worker.",
    )
    metadata_api_url: str = Field(
        default="http://localhost:5060",
        description="Base URL of the metadata service queried for panel data.",
    )
    metadata_api_key: str | None = Field(
        default=None, description="Optional bearer token for the metadata service."
    )
    metadata_timeout: float = Field(
        default=20.0, description="Timeout in seconds for metadata requests."
    )
    watch_url_pattern: str = Field(
        default=DEFAULT_WATCH_URL_PATTERN,
        description="Substring marking a URL as an active playback page.",
    )
    title_selector: str = Field(
        default=DEFAULT_TITLE_SELECTOR,
        description="CSS selector of the element holding the displayed title.",
    )
    prefer_season_markers: bool = Field(
        default=False,
        description="Evaluate season and separator title patterns before the bare episode marker.",
    )
    api_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the X-Ray API used by the CLI and the watcher.",
    )
    browser_profile_dir: str = Field(
        default_factory=default_browser_profile_dir,
        description="Persistent Chromium profile used by the watcher.",
    )

    model_config = SettingsConfigDict(
        env_prefix="XRAY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )
