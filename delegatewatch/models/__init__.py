"""delegatewatch data models: Pydantic v2; DTOs and events are frozen."""

from delegatewatch.models.chain import (
    Block,
    DelegateSnapshot,
    ForgerSchedulePage,
    ForgerSlotEntry,
)
from delegatewatch.models.delegates import Delegate, DelegateStatus, ScheduleState
from delegatewatch.models.events import (
    BlockMissed,
    DroppedTop,
    EventKind,
    MonitorEvent,
    NewTop,
    RankChanged,
    StatusChanged,
)

__all__ = [
    # chain
    "Block",
    "DelegateSnapshot",
    "ForgerSlotEntry",
    "ForgerSchedulePage",
    # delegates
    "Delegate",
    "DelegateStatus",
    "ScheduleState",
    # events
    "EventKind",
    "MonitorEvent",
    "RankChanged",
    "NewTop",
    "DroppedTop",
    "StatusChanged",
    "BlockMissed",
]
