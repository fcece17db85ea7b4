"""
Command-line interface for alerte-meteo.

Usage:
    alerte-meteo serve            # run the API (and static pages if configured)
    alerte-meteo watch            # follow the current alert from a terminal
    alerte-meteo show             # print the current alert once
"""

import asyncio

import click

from .config import settings
from .log_setup import setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Alerte Météo - current weather alert service."""
    if debug:
        settings.log_level = "DEBUG"
    setup_logging()


@main.command()
@click.option("--host", default=None, help="Bind address (default: HOST setting)")
@click.option("--port", default=None, type=int, help="Port (default: PORT setting)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "alerte_meteo.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


def _echo_view(view) -> None:
    from .client.display import render_text

    click.echo(render_text(view))
    click.echo("-" * 40)


@main.command()
@click.option("--url", default=None, help="Service base URL (default: API_BASE_URL)")
@click.option("--interval", default=None, type=float, help="Polling interval in seconds")
def watch(url: str, interval: float) -> None:
    """Poll the service and print the alert whenever it is refreshed."""
    from .client.sync_agent import AlertSyncAgent

    async def run() -> None:
        async with AlertSyncAgent(
            url or settings.api_base_url,
            renderer=_echo_view,
            timeout=settings.request_timeout_sec,
            poll_interval=interval or settings.poll_interval_sec,
            cold_start_delays=settings.cold_start_delays(),
        ) as agent:
            await agent.run()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        click.echo("stopped")


@main.command()
@click.option("--url", default=None, help="Service base URL (default: API_BASE_URL)")
def show(url: str) -> None:
    """Fetch and print the current alert once."""
    from .client.sync_agent import AlertSyncAgent

    async def run() -> str:
        async with AlertSyncAgent(
            url or settings.api_base_url,
            renderer=_echo_view,
            timeout=settings.request_timeout_sec,
        ) as agent:
            return await agent.poll_once()

    outcome = asyncio.run(run())
    if outcome != "ok":
        raise SystemExit(1)


if __name__ == "__main__":
    main()
