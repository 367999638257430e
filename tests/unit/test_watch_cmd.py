"""Tests for the watch command's shutdown path: Ctrl+C ends the loop between cycles."""

from __future__ import annotations

import asyncio
import os
import signal
import sys

import pytest

from delegatewatch.cli.commands.watch_cmd import run_until_stopped
from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.monitor_loop import MonitorLoop

pytestmark = pytest.mark.skipif(
    sys.platform == "win32", reason="loop signal handlers are Unix-only"
)


class TestRunUntilStopped:
    @pytest.mark.asyncio
    async def test_sigint_lets_in_flight_cycle_finish(
        self, fake_source, bus: EventBus, settings, make_snapshot
    ):
        fake_source.roster = [make_snapshot("a", 1)]
        original = fake_source.get_delegate_roster

        async def _slow_roster():
            await asyncio.sleep(0.2)
            return await original()

        fake_source.get_delegate_roster = _slow_roster
        monitor = MonitorLoop(fake_source, bus=bus, settings=settings)

        asyncio.get_running_loop().call_later(0.05, os.kill, os.getpid(), signal.SIGINT)
        await asyncio.wait_for(run_until_stopped(monitor), timeout=5)

        assert fake_source.calls == ["roster", "schedule", "blocks"]
        assert monitor.cycle_count == 1
        assert monitor.failed_cycles == 0
        assert monitor.is_stopping
        assert "a" in monitor.registry

    @pytest.mark.asyncio
    async def test_signal_handler_removed_after_run(self, fake_source, bus: EventBus, settings):
        monitor = MonitorLoop(fake_source, bus=bus, settings=settings)

        await run_until_stopped(monitor, max_cycles=1)

        assert monitor.cycle_count == 1
        assert asyncio.get_running_loop().remove_signal_handler(signal.SIGINT) is False
