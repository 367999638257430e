"""MonitorProjection: pure read-only view over a MonitorLoop.

The projection never stores state.  Every ``snapshot()`` call re-reads the
loop's registry, ledger and schedule.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from delegatewatch.core.monitor_loop import LoopState, MonitorLoop
from delegatewatch.core.rounds import get_round
from delegatewatch.models.delegates import Delegate, DelegateStatus

_MISSING_STATUSES = frozenset(
    {
        DelegateStatus.MISSED_THIS_BLOCK,
        DelegateStatus.MISSED_MORE,
        DelegateStatus.AWAITING_MISSED_LAST,
        DelegateStatus.AWAITING_MISSED_MORE,
    }
)


class DelegateRow(BaseModel):
    """Point-in-time view of a single tracked delegate."""

    model_config = ConfigDict(frozen=True)

    public_key: str
    name: str
    rank: int | None = None
    produced_blocks: int = 0
    status: DelegateStatus | None = None
    last_forged_height: int | None = None
    next_slot: int | None = None
    is_round_member: bool = False


class MonitorSnapshot(BaseModel):
    """A frozen view of the whole monitor, ordered by rank."""

    model_config = ConfigDict(frozen=True)

    network_height: int = 0
    network_round: int = 0
    current_slot: int | None = None
    loop_state: LoopState = LoopState.IDLE
    cycle_count: int = 0
    failed_cycles: int = 0
    last_error: str | None = None
    known_blocks: int = 0
    delegates: list[DelegateRow] = []
    taken_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def forging_count(self) -> int:
        """Delegates that forged in the current round."""
        return sum(
            1 for d in self.delegates if d.status == DelegateStatus.FORGED_THIS_ROUND
        )

    @property
    def missing_delegates(self) -> list[DelegateRow]:
        """Delegates whose last round(s) went without a block."""
        return [d for d in self.delegates if d.status in _MISSING_STATUSES]


class MonitorProjection:
    """Read-only projection over a MonitorLoop.

    Parameters
    ----------
    loop:
        The loop whose state is projected.
    """

    def __init__(self, loop: MonitorLoop) -> None:
        self._loop = loop

    def snapshot(self) -> MonitorSnapshot:
        loop = self._loop
        height = loop.source.best_height()
        rows = sorted(
            (self._row(d) for d in loop.registry),
            key=lambda row: (row.rank is None, row.rank or 0, row.public_key),
        )
        return MonitorSnapshot(
            network_height=height,
            network_round=get_round(height),
            current_slot=loop.schedule.state.current_slot,
            loop_state=loop.state,
            cycle_count=loop.cycle_count,
            failed_cycles=loop.failed_cycles,
            last_error=loop.last_error,
            known_blocks=len(loop.ledger),
            delegates=rows,
        )

    @staticmethod
    def _row(delegate: Delegate) -> DelegateRow:
        snapshot = delegate.latest_snapshot
        return DelegateRow(
            public_key=delegate.public_key,
            name=delegate.display_name,
            rank=delegate.rank,
            produced_blocks=snapshot.produced_blocks if snapshot else 0,
            status=delegate.status,
            last_forged_height=(
                delegate.last_forged_block.height
                if delegate.last_forged_block
                else None
            ),
            next_slot=delegate.next_slot,
            is_round_member=delegate.is_round_member,
        )
