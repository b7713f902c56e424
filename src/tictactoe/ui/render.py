from __future__ import annotations
from typing import Optional, Set

from tictactoe.config import CLEAR_SCREEN, USE_COLOR
from tictactoe.core.board import Board
from tictactoe.core.rules import WinningMove
from tictactoe.types import Mark, Position

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
REVERSE = "\033[7m"

MARK_COLORS = {
    Mark.EMPTY: "\033[90m",  # gray cell numbers
    Mark.X: "\033[31m",      # red crosses
    Mark.O: "\033[33m",      # yellow circles
}
STATUS_COLOR = "\033[36m"


def c(s: str, *codes: str) -> str:
    if not USE_COLOR:
        return s
    return f"{''.join(codes)}{s}{RESET}"


def cell_text(mark: Mark, number: int, width: int, highlight: bool = False) -> str:
    """One cell: its 1-based number while empty, else the mark."""
    text = (str(number) if mark is Mark.EMPTY else mark.value).rjust(width)
    if highlight:
        return c(text, BOLD, REVERSE, MARK_COLORS[mark])
    return c(text, MARK_COLORS[mark])


def clear_screen() -> None:
    if CLEAR_SCREEN:
        print("\033[2J\033[H", end="")


def board_lines(board: Board, winning_move: Optional[WinningMove] = None) -> list[str]:
    hl: Set[Position] = set(winning_move.cells()) if winning_move else set()
    width = len(str(board.side * board.side))
    sep = c("   " + "+".join("-" * (width + 2) for _ in range(board.side)), DIM)

    lines = []
    for r in range(board.side):
        parts = []
        for col in range(board.side):
            pos = Position(r, col)
            idx = board.index_of(pos)
            parts.append(f" {cell_text(board.get_index(idx), idx + 1, width, pos in hl)} ")
        lines.append("   " + "|".join(parts))
        if r < board.side - 1:
            lines.append(sep)
    return lines


def render(board: Board, status: str = "", winning_move: Optional[WinningMove] = None) -> None:
    clear_screen()

    print(c("TIC TAC TOE", BOLD))
    print(c(status, STATUS_COLOR) if status else "")

    for line in board_lines(board, winning_move):
        print(line)

    print()
    print(c(f"   Enter a cell 1-{board.side * board.side} or 'row col'. Enter q to quit.", DIM))
