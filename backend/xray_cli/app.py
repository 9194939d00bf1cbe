"""Command line interface for the X-Ray service and title watcher."""
from __future__ import annotations

import json
import logging
from typing import Optional

import typer

from ..watcher.forwarder import SampleForwarder
from ..watcher.observer import DocumentHost
from ..watcher.parser import TitleParser
from ..watcher.session import watch_page
from ..xray_api.settings import XraySettings
from .client import create_client


app = typer.Typer(help="Follow the title playing in the browser and inspect X-Ray panel data.")


def _api_base_option() -> typer.Option:
    return typer.Option(
        None,
        "--api-base",
        help="Base URL for the X-Ray API service; defaults to XRAY_API_BASE_URL.",
    )


def _resolve_api_base(api_base: Optional[str], settings: Optional[XraySettings] = None) -> str:
    if api_base:
        return api_base
    return (settings or XraySettings()).api_base_url


def _echo_json(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def health(api_base: Optional[str] = _api_base_option()) -> None:
    """Call the /health endpoint and pretty-print the response."""

    with create_client(_resolve_api_base(api_base)) as client:
        response = client.get("/health")
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def parse(
    text: str = typer.Argument(..., help="Raw title as shown by the player."),
    prefer_season_markers: bool = typer.Option(
        False,
        "--prefer-season-markers/--legacy-order",
        help="Try the season and separator patterns before the bare episode marker.",
        show_default=True,
    ),
) -> None:
    """Classify a raw title locally without contacting the service."""

    parsed = TitleParser(prefer_season_markers=prefer_season_markers).parse(text)
    _echo_json(parsed.model_dump(mode="json"))


@app.command()
def submit(
    text: str = typer.Argument(..., help="Raw title text to submit as an observed sample."),
    page_url: str = typer.Option("", "--page-url", help="Page URL recorded with the sample."),
    api_base: Optional[str] = _api_base_option(),
) -> None:
    """Submit a title sample as if the watcher had observed it."""

    with create_client(_resolve_api_base(api_base)) as client:
        response = client.post("/titles/samples", json={"text": text, "pageUrl": page_url})
        response.raise_for_status()
        _echo_json(response.json())


@app.command("last-seen")
def last_seen(api_base: Optional[str] = _api_base_option()) -> None:
    """Display the title that most recently triggered a lookup."""

    with create_client(_resolve_api_base(api_base)) as client:
        response = client.get("/titles/last-seen")
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def panel(api_base: Optional[str] = _api_base_option()) -> None:
    """Display the latest panel payload."""

    with create_client(_resolve_api_base(api_base)) as client:
        response = client.get("/panel")
        if response.status_code == 404:
            typer.echo("No panel data yet", err=True)
            raise typer.Exit(code=1)
        response.raise_for_status()
        _echo_json(response.json())


@app.command()
def watch(
    url: str = typer.Argument(..., help="Streaming page to open, e.g. https://www.netflix.com/browse."),
    headed: bool = typer.Option(
        True,
        "--headed/--headless",
        help="Show the browser window (needed to sign in and play).",
        show_default=True,
    ),
    profile_dir: Optional[str] = typer.Option(
        None,
        "--profile-dir",
        help="Persistent browser profile directory; defaults to XRAY_BROWSER_PROFILE_DIR.",
    ),
    duration: Optional[float] = typer.Option(
        None,
        "--duration",
        min=1,
        help="Stop watching after this many seconds.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    api_base: Optional[str] = _api_base_option(),
) -> None:
    """Open the player in a browser and forward every title change to the API."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    settings = XraySettings()

    forwarders: list[SampleForwarder] = []

    with create_client(_resolve_api_base(api_base, settings)) as client:

        def _handlers(host: DocumentHost) -> list[SampleForwarder]:
            forwarder = SampleForwarder(client, lambda: host.url)
            forwarders.append(forwarder)
            return [forwarder]

        watch_page(
            url,
            _handlers,
            headless=not headed,
            profile_dir=profile_dir or settings.browser_profile_dir,
            duration=duration,
            watch_url_pattern=settings.watch_url_pattern,
            title_selector=settings.title_selector,
        )

    sent = sum(forwarder.sent for forwarder in forwarders)
    failed = sum(forwarder.failed for forwarder in forwarders)
    typer.echo(f"Forwarded {sent} titles ({failed} failed).")
