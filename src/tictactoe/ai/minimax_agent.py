from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from tictactoe.ai.tt import TranspositionTable
from tictactoe.config import DEFAULT_CONFIG, MAX_AI_SIDE, GameConfig
from tictactoe.core.board import Board
from tictactoe.core.rules import check_win
from tictactoe.types import CellIndex, Mark

logger = logging.getLogger(__name__)

WIN_SCORE = 1
LOSS_SCORE = -1
DRAW_SCORE = 0


@dataclass(slots=True)
class MinimaxAgent:
    """
    Exhaustive minimax over every remaining empty cell.

    Terminal positions score +1 / -1 / 0 from the point of view of the mark
    being searched for, with no preference for shorter wins. Work grows
    factorially with the number of empty cells, so this is only meant for
    boards of side 3 or less.
    """

    name: str = "Minimax AI"
    config: GameConfig = DEFAULT_CONFIG
    tt: TranspositionTable = field(default_factory=TranspositionTable)

    # Stats
    last_info: dict = field(default_factory=dict)

    _nodes: int = 0
    _tt_hits: int = 0

    def __post_init__(self) -> None:
        if self.config.side > MAX_AI_SIDE:
            logger.warning(
                "Exhaustive search on a %dx%d board will be very slow (comfortable up to %d).",
                self.config.side, self.config.side, MAX_AI_SIDE,
            )

    def new_game(self) -> None:
        """
        Called between games. The table stays bounded on small boards, so it
        is only thrown away when the board is wider than MAX_AI_SIDE.
        """
        if self.config.side > MAX_AI_SIDE:
            self.tt.clear()

    def choose_move(self, board: Board, mark: Mark) -> Optional[CellIndex]:
        return self.best_move(board, mark)

    def best_move(self, board: Board, mark: Mark) -> Optional[CellIndex]:
        """
        Best cell for `mark`, or None when the board has no empty cell.
        Ties go to the lowest index. The caller's board is never touched.
        """
        if mark is Mark.EMPTY:
            raise ValueError("Cannot search for the empty mark.")

        work = board.copy()
        start = time.perf_counter()
        self._nodes = 0
        self._tt_hits = 0

        best: Optional[CellIndex] = None
        best_score = LOSS_SCORE - 1

        for i in work.empty_indices():
            work.set_index(i, mark)
            score = self._minimax(work, i, mark.other, False, mark)
            work.set_index(i, Mark.EMPTY)

            if score > best_score:
                best = i
                best_score = score

        elapsed = time.perf_counter() - start
        self.last_info = {
            "nodes": self._nodes,
            "tt_hits": self._tt_hits,
            "eval": best_score if best is not None else None,
            "move": best,
            "time_ms": max(1, int(elapsed * 1000)),
        }
        logger.debug(
            "%s searched for %s: move=%s eval=%s nodes=%d tt_hits=%d %dms",
            self.name, mark, best, self.last_info["eval"], self._nodes, self._tt_hits,
            self.last_info["time_ms"],
        )
        return best

    def _terminal_score(self, board: Board, placed: int, perspective: Mark) -> int | None:
        w = check_win(board, placed, self.config.win_length)
        if w is not None:
            return WIN_SCORE if w.mark is perspective else LOSS_SCORE
        if board.is_full():
            return DRAW_SCORE
        return None

    def _minimax(self, board: Board, placed: int, to_play: Mark, is_max: bool, perspective: Mark) -> int:
        self._nodes += 1

        term = self._terminal_score(board, placed, perspective)
        if term is not None:
            return term

        use_tt = self.config.memoize
        if use_tt:
            cached = self.tt.get(board.zhash, placed, to_play, perspective)
            if cached is not None:
                self._tt_hits += 1
                return cached

        if is_max:
            v = LOSS_SCORE - 1
            for i in board.empty_indices():
                board.set_index(i, to_play)
                v = max(v, self._minimax(board, i, to_play.other, False, perspective))
                board.set_index(i, Mark.EMPTY)
        else:
            v = WIN_SCORE + 1
            for i in board.empty_indices():
                board.set_index(i, to_play)
                v = min(v, self._minimax(board, i, to_play.other, True, perspective))
                board.set_index(i, Mark.EMPTY)

        if use_tt:
            self.tt.put(board.zhash, placed, to_play, perspective, v)
        return v
