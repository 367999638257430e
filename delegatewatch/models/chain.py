"""Peer-facing chain DTOs: blocks, roster entries, forging schedule."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Block(BaseModel):
    """A forged block, immutable once ingested."""

    model_config = ConfigDict(frozen=True)

    height: int
    generator_public_key: str


class DelegateSnapshot(BaseModel):
    """One roster entry as reported by the peer."""

    model_config = ConfigDict(frozen=True)

    public_key: str
    rank: int
    produced_blocks: int = 0
    username: str = ""  # display only


class ForgerSlotEntry(BaseModel):
    """An upcoming forger and the slot it is scheduled for."""

    model_config = ConfigDict(frozen=True)

    public_key: str
    next_slot: int


class ForgerSchedulePage(BaseModel):
    """The ordered upcoming-forger list together with the current slot."""

    model_config = ConfigDict(frozen=True)

    entries: list[ForgerSlotEntry] = []
    current_slot: int
