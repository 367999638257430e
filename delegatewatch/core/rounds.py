"""Round arithmetic for the fixed 101-delegate forging set."""

from __future__ import annotations

import math
from collections.abc import Sequence

from delegatewatch.models.chain import ForgerSlotEntry

ROUND_SIZE = 101


def get_round(height: int) -> int:
    """Return the round a block height belongs to (``ceil(height / 101)``)."""
    return math.ceil(height / ROUND_SIZE)


def round_members(
    forgers: Sequence[ForgerSlotEntry], height: int
) -> list[ForgerSlotEntry]:
    """Return the upcoming forgers whose slot still falls in the current round.

    The entry at index ``i`` forges roughly at ``height + i + 1``; it is a
    round member when that height is in the same round as *height*.
    """
    current_round = get_round(height)
    return [
        forger
        for index, forger in enumerate(forgers)
        if get_round(height + index + 1) == current_round
    ]
