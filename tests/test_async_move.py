"""
Tests for the background move computer and its poll contract.
"""

import time

import pytest

from tictactoe.ai.async_move import AsyncMoveComputer
from tictactoe.ai.minimax_agent import MinimaxAgent
from tictactoe.core.board import Board
from tictactoe.types import CellIndex, Mark

from .conftest import board_of


class RecordingSearch:
    """Returns the first empty cell and remembers what it was shown."""

    def __init__(self):
        self.seen = []

    def best_move(self, board, mark):
        self.seen.append((str(board), mark))
        empty = board.empty_indices()
        return empty[0] if empty else None


class FailingSearch:
    def best_move(self, board, mark):
        raise RuntimeError("search blew up")


class TestPollContract:
    def test_nothing_before_start(self, executor):
        computer = AsyncMoveComputer(RecordingSearch(), executor)
        assert not computer.pending
        assert computer.poll(True) is None

    def test_waits_for_search(self, executor):
        computer = AsyncMoveComputer(RecordingSearch(), executor)
        computer.start(board_of("X..", "...", "..."), Mark.O)
        assert computer.pending
        assert computer.poll(True) is None

        executor.run_pending()
        assert computer.poll(True) == 1

    def test_waits_for_think_time_even_when_done(self, executor):
        computer = AsyncMoveComputer(RecordingSearch(), executor)
        computer.start(board_of("X..", "...", "..."), Mark.O)
        executor.run_pending()

        for _ in range(5):
            assert computer.poll(False) is None
        assert computer.poll(True) == 1

    def test_result_is_consumed_once(self, executor):
        computer = AsyncMoveComputer(RecordingSearch(), executor)
        computer.start(Board(), Mark.X)
        executor.run_pending()

        assert computer.poll(True) == 0
        assert not computer.pending
        assert computer.poll(True) is None

    def test_no_move_on_full_board(self, executor):
        computer = AsyncMoveComputer(RecordingSearch(), executor)
        computer.start(board_of("XOX", "XOO", "OXX"), Mark.X)
        executor.run_pending()
        assert computer.poll(True) is None
        assert not computer.pending


class TestSnapshots:
    def test_search_sees_board_as_it_was_at_start(self, executor):
        search = RecordingSearch()
        computer = AsyncMoveComputer(search, executor)
        board = board_of("X..", "...", "...")
        computer.start(board, Mark.O)

        board.set_index(1, Mark.O)
        board.set_index(2, Mark.X)
        executor.run_pending()

        assert search.seen == [("X..\n...\n...", Mark.O)]
        assert computer.poll(True) == 1

    def test_restart_replaces_previous_computation(self, executor):
        search = RecordingSearch()
        computer = AsyncMoveComputer(search, executor)
        computer.start(board_of("X..", "...", "..."), Mark.O)
        computer.start(board_of("XO.", "...", "..."), Mark.X)

        executor.run_pending()

        # The stale job never started, so only the second board was searched
        assert [b for b, _ in search.seen] == ["XO.\n...\n..."]
        assert computer.poll(True) == 2

    def test_discard(self, executor):
        computer = AsyncMoveComputer(RecordingSearch(), executor)
        computer.start(Board(), Mark.X)
        computer.discard()
        executor.run_pending()
        assert computer.poll(True) is None


class TestFailures:
    def test_search_error_reaches_the_caller(self, executor):
        computer = AsyncMoveComputer(FailingSearch(), executor)
        computer.start(Board(), Mark.X)
        executor.run_pending()

        assert computer.poll(False) is None
        with pytest.raises(RuntimeError, match="blew up"):
            computer.poll(True)


class TestRealThread:
    def test_minimum_think_time_on_trivial_board(self, config):
        with AsyncMoveComputer(MinimaxAgent(config=config)) as computer:
            computer.start(board_of("XOX", "XOO", "OX."), Mark.X)

            # The one-cell search finishes almost at once; it must still wait
            deadline = time.monotonic() + 0.2
            while time.monotonic() < deadline:
                assert computer.poll(False) is None
                time.sleep(0.01)

            move = None
            deadline = time.monotonic() + 5.0
            while move is None and time.monotonic() < deadline:
                move = computer.poll(True)
                time.sleep(0.01)

        assert move == CellIndex(8)
