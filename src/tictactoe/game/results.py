from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tictactoe.core.rules import WinningMove
from tictactoe.types import CellIndex, Mark


class RejectReason(str, Enum):
    GAME_OVER = "game_over"
    NOT_YOUR_TURN = "not_your_turn"
    CELL_OCCUPIED = "cell_occupied"


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """What happened to a placement. Wins, draws and refusals are all data."""

    accepted: bool
    index: Optional[CellIndex] = None
    mark: Optional[Mark] = None
    winning_move: Optional[WinningMove] = None
    draw: bool = False
    reason: Optional[RejectReason] = None

    @property
    def game_over(self) -> bool:
        return self.winning_move is not None or self.draw

    @classmethod
    def rejected(cls, reason: RejectReason, index: Optional[CellIndex] = None) -> "MoveOutcome":
        return cls(accepted=False, index=index, reason=reason)
