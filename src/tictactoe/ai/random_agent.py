from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Optional

from tictactoe.core.board import Board
from tictactoe.types import CellIndex, Mark


@dataclass(slots=True)
class RandomAgent:
    name: str = "Random AI"
    rng: random.Random = field(default_factory=random.Random)

    def choose_move(self, board: Board, mark: Mark) -> Optional[CellIndex]:
        moves = board.empty_indices()
        if not moves:
            return None
        return self.rng.choice(moves)
