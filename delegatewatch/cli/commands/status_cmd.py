"""``delegatewatch status``: run one cycle and print the delegate table."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from delegatewatch.cli.commands._runtime import build_loop, configure_logging
from delegatewatch.config import MonitorSettings, settings as default_settings
from delegatewatch.monitor.projection import MonitorProjection, MonitorSnapshot
from delegatewatch.monitor.renderer import MonitorRenderer

console = Console()


async def _collect(settings: MonitorSettings) -> tuple[bool, MonitorSnapshot]:
    loop, source = build_loop(settings)
    async with source:
        ok = await loop.run_cycle()
    return ok, MonitorProjection(loop).snapshot()


def status_cmd(
    peer: str = typer.Option(
        None,
        "--peer",
        "-p",
        help="Base URL of the node API (defaults to DELEGATEWATCH_PEER_URL).",
    ),
) -> None:
    """Query the peer once and show the forging status of every delegate."""
    settings = (
        default_settings.model_copy(update={"peer_url": peer})
        if peer
        else default_settings
    )
    configure_logging(settings.log_level)

    ok, snapshot = asyncio.run(_collect(settings))
    if not ok:
        console.print(
            f"[bold red]Could not read from {settings.peer_url}:[/bold red] "
            f"{snapshot.last_error}"
        )
        raise typer.Exit(code=1)

    MonitorRenderer(console=console).print_snapshot(snapshot)
