"""Application factory for the X-Ray service."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import health, panel, titles
from .settings import XraySettings
from .state import AppState


def create_app(settings: XraySettings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""

    resolved_settings = settings or XraySettings()
    app_state = AppState(settings=resolved_settings)

    app = FastAPI(title="X-Ray API", version="0.1.0")
    app.state.app_state = app_state
    app.state.settings = app_state.settings

    # The panel page is served from the extension origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    for router in (health.router, titles.router, panel.router):
        app.include_router(router)

    return app
