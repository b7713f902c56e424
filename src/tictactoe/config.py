# src/tictactoe/config.py

from __future__ import annotations
from dataclasses import dataclass

from tictactoe.types import Mark

SIDE = 3
WIN_LENGTH = 3

# Searching a wider board exhaustively is too slow to play against
MAX_AI_SIDE = 3

PLAYER_STARTS = True
USE_AI = True

# UI toggles
USE_COLOR = True
CLEAR_SCREEN = True

# “AI thinking” effect
AI_THINKING_SPINNER = True
AI_THINK_TIME_SEC = 0.5  # minimum pause so AI moves aren’t instant

RESTART_DELAY_SEC = 2.0
TICK_SEC = 0.05

# Exact transposition table for the exhaustive search
MEMOIZE_SEARCH = True


@dataclass(frozen=True, slots=True)
class GameConfig:
    side: int = SIDE
    win_length: int = WIN_LENGTH
    player_starts: bool = PLAYER_STARTS
    use_ai: bool = USE_AI
    ai_think_time: float = AI_THINK_TIME_SEC
    restart_delay: float = RESTART_DELAY_SEC
    memoize: bool = MEMOIZE_SEARCH

    def __post_init__(self) -> None:
        if self.side < 1:
            raise ValueError(f"Board side must be at least 1, got {self.side}.")
        if self.win_length < 1:
            raise ValueError(f"Win length must be at least 1, got {self.win_length}.")
        if self.ai_think_time < 0 or self.restart_delay < 0:
            raise ValueError("Delays cannot be negative.")

    @property
    def cells(self) -> int:
        return self.side * self.side

    @property
    def player_mark(self) -> Mark:
        # X always moves first
        return Mark.X if self.player_starts else Mark.O

    @property
    def computer_mark(self) -> Mark:
        return self.player_mark.other


DEFAULT_CONFIG = GameConfig()
