from __future__ import annotations

import logging
from typing import Optional

from tictactoe.ai.async_move import AsyncMoveComputer, MoveSearch
from tictactoe.ai.minimax_agent import MinimaxAgent
from tictactoe.config import DEFAULT_CONFIG, GameConfig
from tictactoe.core.board import Board
from tictactoe.core.rules import check_win
from tictactoe.game.results import MoveOutcome, RejectReason
from tictactoe.game.state import GameState
from tictactoe.types import CellIndex, Mark, Position

logger = logging.getLogger(__name__)

MARK_NAMES = {Mark.X: "Crosses", Mark.O: "Circles"}


class GameSession:
    """
    Turn management for one seat at the board: a human player, and either
    a second human or the computer.

    Everything here runs on the caller's thread. The only thing shared with
    the background search is the computer's pending result.
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        search: MoveSearch | None = None,
        computer: AsyncMoveComputer | None = None,
    ) -> None:
        self.config = config
        if computer is None:
            computer = AsyncMoveComputer(search or MinimaxAgent(name="Computer", config=config))
        self.computer = computer
        self.state = GameState(board=Board(config.side))
        self.reset_game()

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def computer_to_move(self) -> bool:
        s = self.state
        return self.config.use_ai and not s.ended and s.current is self.config.computer_mark

    def reset_game(self) -> None:
        self.computer.discard()
        new_game = getattr(self.computer.search, "new_game", None)
        if new_game is not None:
            new_game()
        s = self.state
        s.board.reset()
        s.current = Mark.X
        s.placed = 0
        s.winning_move = None
        s.ended = False
        s.end_message = ""
        s.think_time = 0.0
        s.restart_timer = 0.0
        s.last_status = "Player X starts."
        logger.info("New game on a %dx%d board.", self.config.side, self.config.side)

        if self.computer_to_move:
            self.request_automated_move()

    def place_player_move(self, pos: Position) -> MoveOutcome:
        """
        Apply a human placement. Off-board positions raise OutOfBounds;
        every other refusal comes back as a rejected outcome.
        """
        s = self.state
        idx = s.board.index_of(Position(*pos))

        if s.ended:
            return MoveOutcome.rejected(RejectReason.GAME_OVER, idx)
        if self.computer_to_move:
            return MoveOutcome.rejected(RejectReason.NOT_YOUR_TURN, idx)
        if s.board.get_index(idx) is not Mark.EMPTY:
            s.last_status = "That cell is taken."
            return MoveOutcome.rejected(RejectReason.CELL_OCCUPIED, idx)

        outcome = self._apply(idx)
        if self.computer_to_move:
            self.request_automated_move()
        return outcome

    def request_automated_move(self) -> None:
        if not self.computer_to_move:
            return
        self.state.think_time = 0.0
        self.computer.start(self.state.board, self.config.computer_mark)

    def poll_automated_move(self, elapsed: float) -> Optional[MoveOutcome]:
        """
        Called every tick while the computer is to move. Returns the outcome
        once a move has been applied.
        """
        if not self.computer_to_move:
            return None

        s = self.state
        s.think_time += elapsed
        move = self.computer.poll(s.think_time >= self.config.ai_think_time)
        if move is None:
            return None

        if s.board.get_index(move) is not Mark.EMPTY:
            # The snapshot is taken on the computer's turn, so this means the board changed underneath it.
            logger.error("Search returned occupied cell %d; asking again.", move)
            self.request_automated_move()
            return None

        return self._apply(move)

    def tick(self, elapsed: float) -> bool:
        """Advance the post-game timer. True when it restarted the match."""
        s = self.state
        if not s.ended:
            return False
        s.restart_timer += elapsed
        if s.restart_timer > self.config.restart_delay:
            self.reset_game()
            return True
        return False

    def _apply(self, idx: CellIndex) -> MoveOutcome:
        s = self.state
        mark = s.current
        s.board.set_index(idx, mark)
        s.placed += 1
        s.current = mark.other

        wm = check_win(s.board, idx, self.config.win_length)
        draw = wm is None and s.placed >= self.config.cells
        s.winning_move = wm

        row, col = s.board.position_of(idx)
        if wm is not None:
            s.ended = True
            if self.config.use_ai and wm.mark is self.config.computer_mark:
                s.end_message = "Computer won!"
            else:
                s.end_message = f"{MARK_NAMES[wm.mark]} win!"
            s.last_status = s.end_message
            logger.info("%s (%s wins)", s.end_message, wm.mark)
        elif draw:
            s.ended = True
            s.end_message = "It's a draw :/"
            s.last_status = s.end_message
            logger.info("Draw.")
        else:
            s.last_status = f"Player {mark} took row {row + 1}, col {col + 1} | Next: Player {s.current}"

        return MoveOutcome(accepted=True, index=idx, mark=mark, winning_move=wm, draw=draw)

    def close(self) -> None:
        self.computer.shutdown()
