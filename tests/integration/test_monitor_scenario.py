"""Integration test: several monitor cycles against an evolving fake peer.

Walks the monitor through a slot rollover, a missed block, a new round
and a roster change, checking the published events and final statuses.
"""

from __future__ import annotations

import pytest

from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.monitor_loop import MonitorLoop
from delegatewatch.models.chain import Block
from delegatewatch.models.delegates import DelegateStatus
from delegatewatch.models.events import (
    BlockMissed,
    DroppedTop,
    EventKind,
    MonitorEvent,
    NewTop,
    RankChanged,
    StatusChanged,
)


def _blocks(generators: dict[int, str]) -> list[Block]:
    return [Block(height=h, generator_public_key=k) for h, k in generators.items()]


@pytest.mark.asyncio
async def test_full_monitoring_scenario(
    fake_source, bus: EventBus, events: list[MonitorEvent], settings, make_snapshot, make_schedule
):
    loop = MonitorLoop(fake_source, bus=bus, settings=settings)
    chain = {297: "C", 298: "B", 299: "C", 300: "B"}

    # Cycle 1: initial roster; A's last block is outside the window
    fake_source.roster = [make_snapshot("A", 1), make_snapshot("B", 2), make_snapshot("C", 3)]
    fake_source.schedule = make_schedule(["A", "B", "C"], 10)
    fake_source.blocks = _blocks(chain)
    fake_source.last_blocks["A"] = Block(height=150, generator_public_key="A")
    fake_source.height = 300
    assert await loop.run_cycle()

    assert [e.event_kind for e in events[:3]] == [EventKind.NEW_TOP] * 3
    statuses = {e.public_key: e.new_status for e in events if isinstance(e, StatusChanged)}
    assert statuses == {
        "A": DelegateStatus.AWAITING_FORGED_LAST,
        "B": DelegateStatus.FORGED_THIS_ROUND,
        "C": DelegateStatus.FORGED_THIS_ROUND,
    }

    # Cycle 2: slot rolls over; A becomes the expected forger
    chain[301] = "B"
    fake_source.schedule = make_schedule(["B", "C", "A"], 11)
    fake_source.blocks = _blocks(chain)
    fake_source.height = 301
    assert await loop.run_cycle()
    assert loop.schedule.state.last_expected_forger is loop.registry.get("A")

    # Cycle 3: A's slot closed without a block from A
    chain[302] = "C"
    fake_source.schedule = make_schedule(["C", "A", "B"], 12)
    fake_source.blocks = _blocks(chain)
    fake_source.height = 302
    assert await loop.run_cycle()

    # Cycle 4: next round begins
    fake_source.schedule = make_schedule(["A", "B", "C"], 13)
    fake_source.height = 304
    assert await loop.run_cycle()

    missed = [e for e in events if isinstance(e, BlockMissed)]
    assert [e.public_key for e in missed] == ["A"]
    assert loop.registry.get("A").status == DelegateStatus.AWAITING_MISSED_LAST
    assert loop.registry.get("B").status == DelegateStatus.AWAITING_FORGED_LAST
    assert loop.registry.get("C").status == DelegateStatus.AWAITING_FORGED_LAST

    # Cycle 5: A leaves the roster, D joins, B and C move up
    events.clear()
    fake_source.roster = [
        make_snapshot("B", 1),
        make_snapshot("C", 2),
        make_snapshot("D", 3, produced_blocks=0),
    ]
    fake_source.schedule = make_schedule(["B", "C", "D"], 14)
    fake_source.height = 305
    assert await loop.run_cycle()

    assert [e.event_kind for e in events] == [
        EventKind.RANK_CHANGED,
        EventKind.RANK_CHANGED,
        EventKind.NEW_TOP,
        EventKind.DROPPED_TOP,
        EventKind.STATUS_CHANGED,
    ]
    rank_events = [e for e in events if isinstance(e, RankChanged)]
    assert [(e.snapshot.public_key, e.rank_delta) for e in rank_events] == [("B", -1), ("C", -1)]
    assert isinstance(events[2], NewTop) and events[2].snapshot.public_key == "D"
    assert isinstance(events[3], DroppedTop) and events[3].snapshot.public_key == "A"
    assert events[4].public_key == "D"
    assert events[4].new_status == DelegateStatus.NEW

    # A was dropped before the schedule phase, so it is no longer expected
    assert loop.schedule.state.last_expected_forger is None
    assert set(loop.registry.public_keys) == {"B", "C", "D"}
    assert loop.failed_cycles == 0
