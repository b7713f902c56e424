from __future__ import annotations
from typing import Optional, Protocol

from tictactoe.core.board import Board
from tictactoe.types import CellIndex, Mark


class Agent(Protocol):
    name: str

    def choose_move(self, board: Board, mark: Mark) -> Optional[CellIndex]:
        ...
