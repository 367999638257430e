"""Monitor events: the closed set of change notifications.

Every event published on the bus is one of the five frozen models below.
Subscribers switch on ``event_kind``; no freeform messages are emitted.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from delegatewatch.models.chain import DelegateSnapshot
from delegatewatch.models.delegates import DelegateStatus


class EventKind(str, Enum):
    """The five event kinds emitted by the monitor."""

    RANK_CHANGED = "rank_changed"
    NEW_TOP = "new_top"
    DROPPED_TOP = "dropped_top"
    STATUS_CHANGED = "status_changed"
    BLOCK_MISSED = "block_missed"


class MonitorEvent(BaseModel):
    """Fields shared by every event."""

    model_config = ConfigDict(frozen=True)

    event_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    event_kind: EventKind


class RankChanged(MonitorEvent):
    """A tracked delegate moved in the roster.

    ``rank_delta`` is new rank minus old rank, so a negative value is an
    improvement (22 -> 20 gives -2).
    """

    event_kind: EventKind = EventKind.RANK_CHANGED
    snapshot: DelegateSnapshot
    rank_delta: int


class NewTop(MonitorEvent):
    """A delegate entered the forging roster."""

    event_kind: EventKind = EventKind.NEW_TOP
    snapshot: DelegateSnapshot


class DroppedTop(MonitorEvent):
    """A delegate left the forging roster."""

    event_kind: EventKind = EventKind.DROPPED_TOP
    snapshot: DelegateSnapshot


class StatusChanged(MonitorEvent):
    """A delegate's forging status was reclassified."""

    event_kind: EventKind = EventKind.STATUS_CHANGED
    public_key: str
    snapshot: DelegateSnapshot | None = None
    old_status: DelegateStatus | None = None
    new_status: DelegateStatus


class BlockMissed(MonitorEvent):
    """The delegate expected in the slot that just closed did not forge."""

    event_kind: EventKind = EventKind.BLOCK_MISSED
    public_key: str
    snapshot: DelegateSnapshot | None = None

