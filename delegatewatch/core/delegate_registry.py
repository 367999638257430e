"""Delegate registry: tracks the forging roster and diffs successive snapshots.

The tracked set always mirrors the most recent roster snapshot.  Each
``reconcile()`` compares the new snapshot with the tracked state and
publishes rank, join and leave events before any stored snapshot is
replaced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from delegatewatch.core.event_bus import EventBus
from delegatewatch.models.chain import DelegateSnapshot
from delegatewatch.models.delegates import Delegate
from delegatewatch.models.events import DroppedTop, NewTop, RankChanged

logger = logging.getLogger(__name__)


class MonitorInvariantError(RuntimeError):
    """Raised when monitor state contradicts its own invariants."""


class DelegateRegistry:
    """Owns the tracked delegates, keyed by public key.

    Parameters
    ----------
    bus:
        The EventBus that receives rank, join and leave events.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._delegates: dict[str, Delegate] = {}

    def __contains__(self, public_key: object) -> bool:
        return public_key in self._delegates

    def __iter__(self) -> Iterator[Delegate]:
        return iter(self._delegates.values())

    def __len__(self) -> int:
        return len(self._delegates)

    def get(self, public_key: str) -> Delegate | None:
        return self._delegates.get(public_key)

    @property
    def public_keys(self) -> list[str]:
        return list(self._delegates)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def reconcile(self, snapshots: Iterable[DelegateSnapshot]) -> None:
        """Apply a roster snapshot, publishing the differences.

        Order matters:
        1. Rank changes for delegates present before and after.
        2. New delegates are tracked (``NewTop``).
        3. Absent delegates are dropped (``DroppedTop``).
        4. Remaining delegates take the new snapshot.

        Steps 1-3 all observe the pre-update snapshots.
        """
        incoming: dict[str, DelegateSnapshot] = {}
        for snapshot in snapshots:
            incoming[snapshot.public_key] = snapshot

        added = [key for key in incoming if key not in self._delegates]
        removed = [key for key in self._delegates if key not in incoming]

        for key, snapshot in incoming.items():
            delegate = self._delegates.get(key)
            if delegate is None or delegate.latest_snapshot is None:
                continue
            old_rank = delegate.latest_snapshot.rank
            if old_rank != snapshot.rank:
                self._bus.publish(
                    RankChanged(snapshot=snapshot, rank_delta=snapshot.rank - old_rank)
                )

        for key in added:
            self._delegates[key] = Delegate(public_key=key)
            self._bus.publish(NewTop(snapshot=incoming[key]))

        for key in removed:
            delegate = self._delegates.pop(key)
            if delegate.latest_snapshot is None:
                raise MonitorInvariantError(
                    f"Tracked delegate {key} has no snapshot to report as dropped"
                )
            self._bus.publish(DroppedTop(snapshot=delegate.latest_snapshot))

        for key, snapshot in incoming.items():
            self._delegates[key].latest_snapshot = snapshot

        if added or removed:
            logger.info(
                "Roster reconciled: %d tracked, %d joined, %d dropped",
                len(self._delegates),
                len(added),
                len(removed),
            )
