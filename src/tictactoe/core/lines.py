from __future__ import annotations
from typing import Tuple

from tictactoe.core.board import Board
from tictactoe.types import Direction, Mark, Position

# (backward, forward) pairs, in the order wins are reported
ORIENTATIONS: Tuple[Tuple[Direction, Direction], ...] = (
    (Direction(-1, 0), Direction(1, 0)),    # vertical (along a column)
    (Direction(0, -1), Direction(0, 1)),    # horizontal (along a row)
    (Direction(-1, -1), Direction(1, 1)),   # diagonal "\"
    (Direction(-1, 1), Direction(1, -1)),   # diagonal "/"
)


def count_run(board: Board, expected: Mark, start: Position, direction: Direction) -> int:
    """
    Count consecutive cells holding `expected`, starting at `start` and
    stepping by `direction`. Zero if `start` is off the board or differs.
    """
    side = board.side
    cells = board.cells
    r, c = start
    n = 0
    while 0 <= r < side and 0 <= c < side and cells[r * side + c] is expected:
        n += 1
        r += direction.dr
        c += direction.dc
    return n
