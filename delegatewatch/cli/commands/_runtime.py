"""Shared CLI plumbing: logging setup and loop construction."""

from __future__ import annotations

import logging

from delegatewatch.config import MonitorSettings
from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.monitor_loop import MonitorLoop
from delegatewatch.source.http_peer import HttpPeerSource


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def build_loop(
    settings: MonitorSettings, bus: EventBus | None = None
) -> tuple[MonitorLoop, HttpPeerSource]:
    """Wire an HttpPeerSource into a MonitorLoop using *settings*."""
    source = HttpPeerSource(settings.peer_url, settings)
    return MonitorLoop(source, bus=bus, settings=settings), source
