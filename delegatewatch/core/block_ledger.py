"""Append-only, height-keyed block ledger.

Design:
- Append-only: a height, once recorded, is never overwritten.
- Ingestion is idempotent: re-ingesting a block is a no-op.
- A tracked delegate's ``last_forged_block`` only ever moves forward.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from delegatewatch.models.chain import Block

if TYPE_CHECKING:
    from delegatewatch.core.delegate_registry import DelegateRegistry
    from delegatewatch.source import PeerSource

logger = logging.getLogger(__name__)


class BlockLedger:
    """Deduplicated map from block height to block."""

    def __init__(self) -> None:
        self._blocks: dict[int, Block] = {}

    def __contains__(self, height: object) -> bool:
        return height in self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def get(self, height: int) -> Block | None:
        return self._blocks.get(height)

    @property
    def best_height(self) -> int | None:
        """Highest recorded height, or ``None`` when the ledger is empty."""
        return max(self._blocks) if self._blocks else None

    def generators_at(self, heights: Iterable[int]) -> set[str]:
        """Return the generator keys of the recorded blocks among *heights*."""
        return {
            self._blocks[h].generator_public_key
            for h in heights
            if h in self._blocks
        }

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, blocks: Iterable[Block], registry: DelegateRegistry) -> int:
        """Record new blocks and advance each generator's last forged block.

        Blocks may arrive in any order.  Returns the number of newly
        recorded heights.
        """
        added = 0
        for block in blocks:
            if block.height in self._blocks:
                continue

            self._blocks[block.height] = block
            added += 1

            delegate = registry.get(block.generator_public_key)
            if delegate is not None and (
                delegate.last_forged_block is None
                or delegate.last_forged_block.height < block.height
            ):
                delegate.last_forged_block = block

        logger.debug("Ingested %d new blocks (ledger size %d)", added, len(self))
        return added

    async def backfill(self, registry: DelegateRegistry, source: PeerSource) -> int:
        """Look up the last block of delegates that forged outside the window.

        Applies to every tracked delegate that reports produced blocks but
        has no known last forged block.  Lookups are awaited one at a time;
        a source failure propagates to the caller.  Returns the number of
        delegates updated.
        """
        updated = 0
        for delegate in list(registry):
            snapshot = delegate.latest_snapshot
            if (
                snapshot is None
                or snapshot.produced_blocks <= 0
                or delegate.last_forged_block is not None
            ):
                continue

            block = await source.get_last_block_of(delegate.public_key)
            if block is None:
                logger.debug("No last block found for %s", delegate.public_key)
                continue
            delegate.last_forged_block = block
            updated += 1

        if updated:
            logger.debug("Backfilled last forged block for %d delegates", updated)
        return updated
