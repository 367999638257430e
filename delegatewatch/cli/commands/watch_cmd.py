"""``delegatewatch watch``: follow a peer and print every monitor event."""

from __future__ import annotations

import asyncio
import signal

import typer
from rich.console import Console

from delegatewatch.cli.commands._runtime import build_loop, configure_logging
from delegatewatch.config import MonitorSettings, settings as default_settings
from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.monitor_loop import MonitorLoop
from delegatewatch.monitor.renderer import MonitorRenderer

console = Console()


async def run_until_stopped(monitor: MonitorLoop, max_cycles: int | None = None) -> None:
    """Run *monitor* with SIGINT routed to ``MonitorLoop.stop()``.

    Ctrl+C lets the in-flight cycle finish and ends the loop before the
    next one starts.
    """
    event_loop = asyncio.get_running_loop()
    event_loop.add_signal_handler(signal.SIGINT, monitor.stop)
    try:
        await monitor.start(max_cycles=max_cycles)
    finally:
        event_loop.remove_signal_handler(signal.SIGINT)


async def _watch(settings: MonitorSettings, max_cycles: int | None) -> None:
    renderer = MonitorRenderer(console=console)
    bus = EventBus()
    bus.register_catch_all(renderer.print_event)

    loop, source = build_loop(settings, bus)
    async with source:
        await run_until_stopped(loop, max_cycles)


def watch_cmd(
    peer: str = typer.Option(
        None,
        "--peer",
        "-p",
        help="Base URL of the node API (defaults to DELEGATEWATCH_PEER_URL).",
    ),
    interval: float = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between cycles.",
    ),
    max_cycles: int = typer.Option(
        None,
        "--cycles",
        "-n",
        help="Stop after this many cycles.",
    ),
) -> None:
    """Run the monitor loop and print events as they happen (Ctrl+C to exit)."""
    overrides: dict[str, object] = {}
    if peer:
        overrides["peer_url"] = peer
    if interval is not None:
        overrides["interval_seconds"] = interval
    settings = default_settings.model_copy(update=overrides)
    configure_logging(settings.log_level)

    console.print(
        f"[dim]Watching {settings.peer_url} every {settings.interval_seconds}s. "
        "Press Ctrl+C to exit.[/dim]"
    )
    try:
        asyncio.run(_watch(settings, max_cycles))
    except KeyboardInterrupt:
        console.print("[dim]Interrupted.[/dim]")
    else:
        console.print("[dim]Stopped.[/dim]")
