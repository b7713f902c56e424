from __future__ import annotations

from tictactoe.types import Mark

# (Zobrist hash, last placed cell, side to move, maximizing side)
TTKey = tuple[int, int, Mark, Mark]


class TranspositionTable:
    """
    Exact minimax values for already-searched sub-trees.

    The search has no depth limit, so a stored score is final. Keying on
    the last placed cell keeps the terminal test identical to the uncached
    search.
    """

    def __init__(self) -> None:
        self._d: dict[TTKey, int] = {}

    def get(self, key_hash: int, last: int, to_play: Mark, perspective: Mark) -> int | None:
        return self._d.get((key_hash, last, to_play, perspective))

    def put(self, key_hash: int, last: int, to_play: Mark, perspective: Mark, score: int) -> None:
        self._d[(key_hash, last, to_play, perspective)] = score

    def clear(self) -> None:
        self._d.clear()

    def __len__(self) -> int:
        return len(self._d)
