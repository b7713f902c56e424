# src/tictactoe/core/board.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List

from tictactoe.config import SIDE
from tictactoe.core.errors import CellOccupied, OutOfBounds
from tictactoe.core.zobrist import piece_key
from tictactoe.types import CellIndex, Mark, Position


@dataclass(slots=True)
class Board:
    side: int = SIDE
    cells: List[Mark] = field(default_factory=list)
    zhash: int = 0  # incremental Zobrist hash (pieces only)

    def __post_init__(self) -> None:
        if self.side < 1:
            raise ValueError(f"Board side must be at least 1, got {self.side}.")
        if not self.cells:
            self.cells = [Mark.EMPTY] * (self.side * self.side)
        else:
            # The board owns its cells; zhash only tracks its own mutations
            self.cells = list(self.cells)
        if len(self.cells) != self.side * self.side:
            raise ValueError(f"Expected {self.side * self.side} cells, got {len(self.cells)}.")
        self._recompute_zhash()

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Board":
        """
        Build a board from text rows such as ["X.O", ".X.", "..O"].
        Handy for tests and tooling.
        """
        rows = [r.strip() for r in rows]
        side = len(rows)
        cells: List[Mark] = []
        for r in rows:
            if len(r) != side:
                raise ValueError(f"Row {r!r} does not match board side {side}.")
            cells.extend(Mark(ch) for ch in r)
        return cls(side, cells)

    def _recompute_zhash(self) -> None:
        h = 0
        for i, m in enumerate(self.cells):
            h ^= piece_key(self.side, i, m)
        self.zhash = h

    def copy(self) -> "Board":
        b = Board.__new__(Board)
        b.side = self.side
        b.cells = self.cells[:]
        b.zhash = self.zhash
        return b

    # -- coordinates ---------------------------------------------------

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos[0] < self.side and 0 <= pos[1] < self.side

    def index_of(self, pos: Position) -> CellIndex:
        if not self.in_bounds(pos):
            raise OutOfBounds(f"Position {tuple(pos)} is outside a {self.side}x{self.side} board.")
        return CellIndex(pos[0] * self.side + pos[1])

    def position_of(self, index: int) -> Position:
        self._check_index(index)
        return Position(*divmod(index, self.side))

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.cells):
            raise OutOfBounds(f"Cell {index} is outside a {self.side}x{self.side} board.")

    # -- access --------------------------------------------------------

    def get(self, pos: Position) -> Mark:
        return self.cells[self.index_of(pos)]

    def set(self, pos: Position, mark: Mark) -> None:
        self.set_index(self.index_of(pos), mark)

    def get_index(self, index: int) -> Mark:
        self._check_index(index)
        return self.cells[index]

    def set_index(self, index: int, mark: Mark) -> None:
        self._check_index(index)
        old = self.cells[index]
        if old is mark:
            return
        self.zhash ^= piece_key(self.side, index, old) ^ piece_key(self.side, index, mark)
        self.cells[index] = mark

    def place(self, pos: Position, mark: Mark) -> CellIndex:
        """Put a player mark on an empty cell and return its index."""
        if mark is Mark.EMPTY:
            raise ValueError("Cannot place an empty mark.")
        idx = self.index_of(pos)
        if self.cells[idx] is not Mark.EMPTY:
            raise CellOccupied(f"Cell {tuple(pos)} is already taken by {self.cells[idx]}.")
        self.set_index(idx, mark)
        return idx

    # -- queries -------------------------------------------------------

    def is_full(self) -> bool:
        return Mark.EMPTY not in self.cells

    def empty_indices(self) -> List[CellIndex]:
        return [CellIndex(i) for i, m in enumerate(self.cells) if m is Mark.EMPTY]

    def count(self, mark: Mark) -> int:
        return self.cells.count(mark)

    def reset(self) -> None:
        self.cells = [Mark.EMPTY] * (self.side * self.side)
        self.zhash = 0

    def rows(self) -> List[str]:
        s = self.side
        return ["".join(m.value for m in self.cells[r * s:(r + 1) * s]) for r in range(s)]

    def __str__(self) -> str:
        return "\n".join(self.rows())
