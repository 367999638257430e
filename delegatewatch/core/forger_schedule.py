"""Forging schedule: slot rollover, missed blocks and round membership."""

from __future__ import annotations

import logging

from delegatewatch.core.block_ledger import BlockLedger
from delegatewatch.core.delegate_registry import DelegateRegistry
from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.rounds import round_members
from delegatewatch.models.chain import ForgerSchedulePage
from delegatewatch.models.delegates import ScheduleState
from delegatewatch.models.events import BlockMissed

logger = logging.getLogger(__name__)

# Blocks at best, best-1 and best-2 are checked, giving the network one
# extra slot to propagate the expected block.
MISSED_BLOCK_GRACE_WINDOW = 3


class ForgerSchedule:
    """Holds the slot counter and the upcoming-forger list.

    Parameters
    ----------
    bus:
        The EventBus that receives missed-block events.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self.state = ScheduleState()

    def reconcile(
        self,
        page: ForgerSchedulePage,
        ledger: BlockLedger,
        registry: DelegateRegistry,
        network_height: int,
    ) -> None:
        """Apply a forger schedule snapshot.

        When the current slot advanced, the previously expected forger is
        checked against the most recent blocks and the forger due in the
        slot that just closed becomes the next one to check.  The upcoming
        list and per-delegate round membership are refreshed every time.
        """
        state = self.state

        if state.current_slot is not None and page.current_slot > state.current_slot:
            self._check_missed_block(ledger, registry)

            previous = state.upcoming_forgers
            state.last_expected_forger = (
                registry.get(previous[0].public_key) if previous else None
            )

        state.upcoming_forgers = list(page.entries)
        members = {
            entry.public_key
            for entry in round_members(state.upcoming_forgers, network_height)
        }
        for entry in state.upcoming_forgers:
            delegate = registry.get(entry.public_key)
            if delegate is None:
                continue
            delegate.next_slot = entry.next_slot
            delegate.is_round_member = entry.public_key in members

        state.current_slot = page.current_slot

    def _check_missed_block(
        self, ledger: BlockLedger, registry: DelegateRegistry
    ) -> None:
        expected = self.state.last_expected_forger
        if expected is None:
            return
        # the roster phase may have dropped it since the previous rollover
        tracked = registry.get(expected.public_key)
        if tracked is None:
            logger.debug(
                "Expected forger %s is no longer tracked; skipping missed-block check",
                expected.public_key,
            )
            return
        expected = tracked

        best_height = ledger.best_height
        if best_height is None:
            logger.warning(
                "Slot advanced with an empty block ledger; skipping missed-block check for %s",
                expected.public_key,
            )
            return

        window = range(best_height - MISSED_BLOCK_GRACE_WINDOW + 1, best_height + 1)
        if expected.public_key not in ledger.generators_at(window):
            logger.info("Delegate %s missed its block", expected.display_name)
            self._bus.publish(
                BlockMissed(
                    public_key=expected.public_key,
                    snapshot=expected.latest_snapshot,
                )
            )
