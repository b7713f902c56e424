from __future__ import annotations
from typing import Optional

from tictactoe.types import Position


def parse_move(raw: str, side: int) -> Optional[Position]:
    """
    Accepts a 1-based cell number ("5") or a 1-based "row col" pair
    ("2 3" or "2,3"). Returns None when the player wants to quit.
    """
    s = raw.strip().lower()
    if s in {"q", "quit", "exit"}:
        return None

    parts = s.replace(",", " ").split()
    if not parts or not all(p.isdigit() for p in parts):
        raise ValueError("Invalid input. Enter a cell number, 'row col', or q.")

    if len(parts) == 1:
        n = int(parts[0])
        if n < 1 or n > side * side:
            raise ValueError(f"Cell must be between 1 and {side * side}.")
        return Position(*divmod(n - 1, side))

    if len(parts) == 2:
        row, col = int(parts[0]), int(parts[1])
        if not (1 <= row <= side and 1 <= col <= side):
            raise ValueError(f"Row and column must be between 1 and {side}.")
        return Position(row - 1, col - 1)

    raise ValueError("Too many numbers. Enter a cell number or 'row col'.")
