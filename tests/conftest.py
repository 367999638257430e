"""Shared test fixtures for delegatewatch."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from delegatewatch.config import MonitorSettings
from delegatewatch.core.block_ledger import BlockLedger
from delegatewatch.core.delegate_registry import DelegateRegistry
from delegatewatch.core.event_bus import EventBus
from delegatewatch.core.forger_schedule import ForgerSchedule
from delegatewatch.models.chain import (
    Block,
    DelegateSnapshot,
    ForgerSchedulePage,
    ForgerSlotEntry,
)
from delegatewatch.models.events import MonitorEvent
from delegatewatch.source import PeerSourceError


class FakePeerSource:
    """In-memory peer source.  Tests set the attributes between cycles.

    Setting one of ``fail_*`` to True makes the matching query raise
    ``PeerSourceError``.
    """

    def __init__(self) -> None:
        self.roster: list[DelegateSnapshot] = []
        self.schedule = ForgerSchedulePage(entries=[], current_slot=0)
        self.blocks: list[Block] = []
        self.last_blocks: dict[str, Block] = {}
        self.height = 0
        self.fail_roster = False
        self.fail_schedule = False
        self.fail_blocks = False
        self.calls: list[str] = []

    async def get_delegate_roster(self) -> list[DelegateSnapshot]:
        self.calls.append("roster")
        if self.fail_roster:
            raise PeerSourceError("roster unavailable")
        return list(self.roster)

    async def get_forger_schedule(self) -> ForgerSchedulePage:
        self.calls.append("schedule")
        if self.fail_schedule:
            raise PeerSourceError("schedule unavailable")
        return self.schedule

    async def get_recent_blocks(self) -> list[Block]:
        self.calls.append("blocks")
        if self.fail_blocks:
            raise PeerSourceError("blocks unavailable")
        return list(self.blocks)

    async def get_last_block_of(self, public_key: str) -> Block | None:
        self.calls.append(f"last_block:{public_key}")
        return self.last_blocks.get(public_key)

    def best_height(self) -> int:
        return self.height


@pytest.fixture
def settings() -> MonitorSettings:
    """Settings with a zero interval so loop tests do not sleep."""
    return MonitorSettings(interval_seconds=0.0)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def events(bus: EventBus) -> list[MonitorEvent]:
    """Every event published on ``bus``, in order."""
    received: list[MonitorEvent] = []
    bus.register_catch_all(received.append)
    return received


@pytest.fixture
def registry(bus: EventBus) -> DelegateRegistry:
    return DelegateRegistry(bus)


@pytest.fixture
def ledger() -> BlockLedger:
    return BlockLedger()


@pytest.fixture
def schedule(bus: EventBus) -> ForgerSchedule:
    return ForgerSchedule(bus)


@pytest.fixture
def fake_source() -> FakePeerSource:
    return FakePeerSource()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_snapshot() -> Callable[..., DelegateSnapshot]:
    """Factory fixture: build a DelegateSnapshot with sensible defaults."""

    def _factory(public_key: str, rank: int = 1, **overrides: Any) -> DelegateSnapshot:
        defaults: dict[str, Any] = {
            "public_key": public_key,
            "rank": rank,
            "produced_blocks": 10,
            "username": f"delegate_{public_key}",
        }
        defaults.update(overrides)
        return DelegateSnapshot(**defaults)

    return _factory


@pytest.fixture
def make_schedule() -> Callable[..., ForgerSchedulePage]:
    """Factory fixture: build a ForgerSchedulePage from public keys."""

    def _factory(keys: list[str], current_slot: int) -> ForgerSchedulePage:
        return ForgerSchedulePage(
            entries=[
                ForgerSlotEntry(public_key=key, next_slot=current_slot + 1 + i)
                for i, key in enumerate(keys)
            ],
            current_slot=current_slot,
        )

    return _factory
