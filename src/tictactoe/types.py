# src/tictactoe/types.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, NewType

CellIndex = NewType("CellIndex", int)   # row-major: row * side + col


class Mark(str, Enum):
    EMPTY = "."
    X = "X"
    O = "O"

    @property
    def other(self) -> "Mark":
        if self is Mark.X:
            return Mark.O
        if self is Mark.O:
            return Mark.X
        raise ValueError("Empty cells have no opponent.")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Direction:
    dr: int
    dc: int

    def __post_init__(self) -> None:
        if self.dr not in (-1, 0, 1) or self.dc not in (-1, 0, 1):
            raise ValueError(f"Direction components must be -1, 0 or 1, got ({self.dr}, {self.dc}).")
        if self.dr == 0 and self.dc == 0:
            raise ValueError("Direction (0, 0) never leaves its start cell.")

    def __neg__(self) -> "Direction":
        return Direction(-self.dr, -self.dc)


class Position(NamedTuple):
    row: int
    col: int

    def step(self, d: Direction, times: int = 1) -> "Position":
        return Position(self.row + d.dr * times, self.col + d.dc * times)
