from __future__ import annotations
import random
from functools import lru_cache
from typing import Dict, Tuple

from tictactoe.types import Mark

_SEED = 1337


@lru_cache(maxsize=None)
def keys_for(side: int) -> Tuple[Dict[Mark, int], ...]:
    """
    Per-cell piece keys for a board of the given side.
    Deterministic for reproducibility; one table per board size.
    """
    rng = random.Random(_SEED + side)
    return tuple(
        {Mark.X: rng.getrandbits(64), Mark.O: rng.getrandbits(64)}
        for _ in range(side * side)
    )


def piece_key(side: int, index: int, mark: Mark) -> int:
    if mark is Mark.EMPTY:
        return 0
    return keys_for(side)[index][mark]
