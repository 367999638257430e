"""Peer source protocol: the data contract the monitor consumes.

A peer source answers four asynchronous queries (roster, forger schedule,
recent blocks, last block of a delegate) and reports the best network
height it knows of.  Every query may fail; failures are raised as
``PeerSourceError``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from delegatewatch.models.chain import (
    Block,
    DelegateSnapshot,
    ForgerSchedulePage,
)


class PeerSourceError(RuntimeError):
    """Raised when a peer query fails (transport, status code, payload)."""


@runtime_checkable
class PeerSource(Protocol):
    """Protocol every peer data source must implement."""

    async def get_delegate_roster(self) -> list[DelegateSnapshot]:
        """Return the current forging roster."""
        ...

    async def get_forger_schedule(self) -> ForgerSchedulePage:
        """Return the upcoming forgers and the current slot."""
        ...

    async def get_recent_blocks(self) -> list[Block]:
        """Return a bounded window of recent blocks, in any order."""
        ...

    async def get_last_block_of(self, public_key: str) -> Block | None:
        """Return the most recent block forged by *public_key*."""
        ...

    def best_height(self) -> int:
        """Return the best network height known to this source."""
        ...
