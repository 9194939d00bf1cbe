"""Database helpers for the X-Ray service."""
from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from . import models  # noqa: F401  # registers tables on SQLModel.metadata
from .settings import XraySettings
from .utils.paths import ensure_sqlite_directory


def create_engine_from_settings(settings: XraySettings) -> Engine:
    """Create a SQLModel engine using service settings."""

    ensure_sqlite_directory(settings.database_url)
    connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    return create_engine(settings.database_url, echo=settings.database_echo, connect_args=connect_args)


def init_database(engine: Engine) -> None:
    """Create tables if they do not exist yet."""

    SQLModel.metadata.create_all(engine)

