from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from tictactoe.core.board import Board
from tictactoe.core.rules import WinningMove
from tictactoe.types import Mark


@dataclass(slots=True)
class GameState:
    board: Board
    current: Mark = Mark.X
    placed: int = 0
    winning_move: Optional[WinningMove] = None
    ended: bool = False
    end_message: str = ""
    think_time: float = 0.0
    restart_timer: float = 0.0
    last_status: str = "Player X starts."
