from __future__ import annotations


class TicTacToeError(Exception):
    pass


class OutOfBounds(TicTacToeError, IndexError):
    """Position outside the grid. Callers are expected to prevent this."""


class CellOccupied(TicTacToeError, ValueError):
    pass
