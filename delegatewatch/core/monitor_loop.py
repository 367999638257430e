"""Monitor loop: runs reconciliation cycles on a fixed interval.

One cycle is four phases, strictly in order:

1. Roster reconciliation (DelegateRegistry)
2. Forger schedule reconciliation (ForgerSchedule)
3. Block ingestion and backfill (BlockLedger)
4. Status classification of every tracked delegate

Later phases read state written by earlier ones, so each phase completes,
events included, before the next begins.  A failing phase aborts the rest
of its cycle; the loop re-arms regardless and the next cycle is the retry.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from delegatewatch.config import MonitorSettings
from delegatewatch.core.block_ledger import BlockLedger
from delegatewatch.core.delegate_registry import DelegateRegistry
from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.forger_schedule import ForgerSchedule
from delegatewatch.core.status_engine import classify
from delegatewatch.models.events import StatusChanged
from delegatewatch.source import PeerSource, PeerSourceError

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    IDLE = "idle"
    CYCLING = "cycling"


class MonitorLoop:
    """Owns the monitor state and drives it from a peer source.

    Parameters
    ----------
    source:
        The peer source to query every cycle.
    bus:
        EventBus receiving all monitor events.  A new one is created if
        not provided.
    settings:
        Loop settings.  Defaults to ``MonitorSettings()``.
    """

    def __init__(
        self,
        source: PeerSource,
        bus: EventBus | None = None,
        settings: MonitorSettings | None = None,
    ) -> None:
        self.source = source
        self.bus = bus or EventBus()
        self.settings = settings or MonitorSettings()

        self.registry = DelegateRegistry(self.bus)
        self.schedule = ForgerSchedule(self.bus)
        self.ledger = BlockLedger()

        self.state = LoopState.IDLE
        self.cycle_count = 0
        self.failed_cycles = 0
        self.last_error: str | None = None
        self._stopping = asyncio.Event()

    # ------------------------------------------------------------------
    # Single cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> bool:
        """Run one reconciliation cycle.

        Returns True when all four phases completed.  Transport failures
        (``PeerSourceError``) are logged and absorbed at this boundary so
        the loop keeps ticking; anything else is a defect and propagates.
        """
        self.state = LoopState.CYCLING
        self.cycle_count += 1
        try:
            await self._update_delegates()
            await self._update_forgers()
            await self._update_blocks()
            self._update_statuses()
        except PeerSourceError as exc:
            self._record_failure(str(exc))
            logger.error("Cycle %d aborted: %s", self.cycle_count, exc)
            return False
        finally:
            self.state = LoopState.IDLE

        self.last_error = None
        return True

    def _record_failure(self, message: str) -> None:
        self.failed_cycles += 1
        self.last_error = message

    async def _update_delegates(self) -> None:
        roster = await self.source.get_delegate_roster()
        self.registry.reconcile(roster)

    async def _update_forgers(self) -> None:
        page = await self.source.get_forger_schedule()
        self.schedule.reconcile(
            page, self.ledger, self.registry, self.source.best_height()
        )

    async def _update_blocks(self) -> None:
        blocks = await self.source.get_recent_blocks()
        self.ledger.ingest(blocks, self.registry)
        await self.ledger.backfill(self.registry, self.source)

    def _update_statuses(self) -> None:
        height = self.source.best_height()
        for delegate in list(self.registry):
            old_status = delegate.status
            new_status = classify(delegate, height)
            if new_status == old_status:
                continue
            delegate.status = new_status
            self.bus.publish(
                StatusChanged(
                    public_key=delegate.public_key,
                    snapshot=delegate.latest_snapshot,
                    old_status=old_status,
                    new_status=new_status,
                )
            )

    # ------------------------------------------------------------------
    # Loop lifecycle
    # ------------------------------------------------------------------

    @property
    def is_stopping(self) -> bool:
        return self._stopping.is_set()

    def stop(self) -> None:
        """Stop the loop after the in-flight cycle, if any, completes."""
        self._stopping.set()

    async def start(self, max_cycles: int | None = None) -> None:
        """Run cycles until ``stop()`` is called.

        The first cycle runs immediately; each following cycle starts
        ``interval_seconds`` after the previous one finished.  Cycles
        never overlap.  *max_cycles* bounds the run, mainly for one-shot
        use and tests.
        """
        self._stopping.clear()
        logger.info(
            "Monitor loop started (interval %.1fs)", self.settings.interval_seconds
        )
        completed = 0
        while not self._stopping.is_set():
            await self.run_cycle()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            try:
                await asyncio.wait_for(
                    self._stopping.wait(), timeout=self.settings.interval_seconds
                )
            except asyncio.TimeoutError:
                pass
        logger.info("Monitor loop stopped after %d cycles", completed)
