from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Union

from tictactoe.config import WIN_LENGTH
from tictactoe.core.board import Board
from tictactoe.core.lines import ORIENTATIONS, count_run
from tictactoe.types import Direction, Mark, Position


@dataclass(frozen=True, slots=True)
class WinningMove:
    mark: Mark
    anchor: Position       # far end of the run, reached by scanning backward
    direction: Direction   # the backward scan direction
    length: int

    def cells(self) -> List[Position]:
        """Every cell of the run, from the anchor walking forward."""
        forward = -self.direction
        return [self.anchor.step(forward, i) for i in range(self.length)]


def _as_position(board: Board, last: Union[Position, int]) -> Position:
    if isinstance(last, int):
        return board.position_of(last)
    pos = Position(*last)
    board.index_of(pos)  # bounds check
    return pos


def check_win(board: Board, last: Union[Position, int], win_length: int = WIN_LENGTH) -> Optional[WinningMove]:
    """
    Did the mark at `last` complete a run of at least `win_length`?

    Orientations are tried in a fixed order and only the first one that
    qualifies is reported, even if the move completed several lines.
    """
    pos = _as_position(board, last)
    mark = board.get(pos)
    if mark is Mark.EMPTY:
        return None

    for backward, forward in ORIENTATIONS:
        back = count_run(board, mark, pos, backward)
        fwd = count_run(board, mark, pos.step(forward), forward)
        if back + fwd >= win_length:
            return WinningMove(
                mark=mark,
                anchor=pos.step(backward, back - 1),
                direction=backward,
                length=back + fwd,
            )
    return None


def is_draw(board: Board, last: Union[Position, int], win_length: int = WIN_LENGTH) -> bool:
    return board.is_full() and check_win(board, last, win_length) is None


def find_any_win(board: Board, win_length: int = WIN_LENGTH) -> Optional[WinningMove]:
    """
    Scan every occupied cell. For boards that were not built one move at a
    time (loaded positions, random openings).
    """
    for i, m in enumerate(board.cells):
        if m is Mark.EMPTY:
            continue
        wm = check_win(board, i, win_length)
        if wm is not None:
            return wm
    return None
