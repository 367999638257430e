"""Forging status classification.

``classify`` is a pure function of a delegate's accumulated state and the
current network height.  The rule order below is significant: several
conditions overlap until the round-membership guards are applied.
"""

from __future__ import annotations

from delegatewatch.core.rounds import get_round
from delegatewatch.models.delegates import Delegate, DelegateStatus


def awaiting_slots(delegate: Delegate, network_height: int) -> int | None:
    """Rounds elapsed since the delegate last forged.

    ``-1`` marks a delegate that never forged; ``None`` means the delegate
    has forged but its last block is not yet known.
    """
    snapshot = delegate.latest_snapshot
    if snapshot is None:
        return None
    if delegate.last_forged_block is not None:
        return get_round(network_height) - get_round(delegate.last_forged_block.height)
    if snapshot.produced_blocks == 0:
        return -1
    return None


def classify(delegate: Delegate, network_height: int) -> DelegateStatus | None:
    """Return the forging status of *delegate* at *network_height*.

    The delegate's current status is returned unchanged when it has no
    snapshot yet or when no rule applies.
    """
    awaiting = awaiting_slots(delegate, network_height)
    if awaiting is None:
        return delegate.status

    member = delegate.is_round_member
    if awaiting == 0:
        return DelegateStatus.FORGED_THIS_ROUND
    if awaiting == -1:
        return DelegateStatus.NEW
    if not member and awaiting == 1:
        return DelegateStatus.MISSED_THIS_BLOCK
    if not member and awaiting > 1:
        return DelegateStatus.MISSED_MORE
    if awaiting == 1:
        return DelegateStatus.AWAITING_FORGED_LAST
    if awaiting == 2:
        return DelegateStatus.AWAITING_MISSED_LAST
    if awaiting > 1:
        return DelegateStatus.AWAITING_MISSED_MORE
    return delegate.status
