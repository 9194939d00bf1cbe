"""Router exports for the X-Ray service."""
from . import health, panel, titles

__all__ = ["health", "panel", "titles"]
