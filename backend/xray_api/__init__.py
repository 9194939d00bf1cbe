"""X-Ray service: title dispatch, lookup queue, and panel payloads."""

from .app import create_app

__all__ = ["create_app"]
