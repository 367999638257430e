"""Tracked delegate entity and forging status classification."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from delegatewatch.models.chain import Block, DelegateSnapshot, ForgerSlotEntry


class DelegateStatus(str, Enum):
    """Forging health of a delegate relative to the current round."""

    FORGED_THIS_ROUND = "forged_this_round"
    MISSED_THIS_BLOCK = "missed_this_block"
    MISSED_MORE = "missed_more"
    AWAITING_MISSED_LAST = "awaiting_missed_last"
    AWAITING_MISSED_MORE = "awaiting_missed_more"
    AWAITING_FORGED_LAST = "awaiting_forged_last"
    NEW = "new"


class Delegate(BaseModel):
    """A delegate tracked by the registry, with its derived forging state.

    Unlike the DTOs this model is mutable: the registry, schedule and
    ledger update it in place during a cycle.
    """

    model_config = ConfigDict(validate_assignment=True)

    public_key: str
    latest_snapshot: DelegateSnapshot | None = None
    last_forged_block: Block | None = None
    next_slot: int | None = None
    is_round_member: bool = False
    status: DelegateStatus | None = None

    @property
    def rank(self) -> int | None:
        return self.latest_snapshot.rank if self.latest_snapshot else None

    @property
    def display_name(self) -> str:
        if self.latest_snapshot and self.latest_snapshot.username:
            return self.latest_snapshot.username
        return self.public_key[:12]


class ScheduleState(BaseModel):
    """Forging schedule as of the last reconciled cycle."""

    current_slot: int | None = None
    upcoming_forgers: list[ForgerSlotEntry] = []
    last_expected_forger: Delegate | None = None
