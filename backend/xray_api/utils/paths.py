"""Filesystem helpers for X-Ray configuration paths."""
from __future__ import annotations

from pathlib import Path

from platformdirs import user_data_dir


APP_NAME = "X-Ray"
APP_AUTHOR = "X-Ray"


def default_browser_profile_dir() -> str:
    """Return the platform-appropriate browser profile directory."""

    base_dir = Path(user_data_dir(APP_NAME, APP_AUTHOR))
    return str(base_dir / "browser-profile")


def ensure_sqlite_directory(database_url: str) -> None:
    """Create parent directories when using a SQLite URL."""

    if database_url.startswith("sqlite:///"):
        path_part = database_url.removeprefix("sqlite:///").split("?")[0]
        if path_part:
            Path(path_part).expanduser().parent.mkdir(parents=True, exist_ok=True)
