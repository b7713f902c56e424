"""
Pytest fixtures for the tic-tac-toe engine tests.
"""

from concurrent.futures import Executor, Future

import pytest

from tictactoe.ai.minimax_agent import MinimaxAgent
from tictactoe.config import GameConfig
from tictactoe.core.board import Board


class ManualExecutor(Executor):
    """Executor that only runs submitted work when told to."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, /, *args, **kwargs):
        fut = Future()
        self.jobs.append((fut, fn, args, kwargs))
        return fut

    def run_pending(self):
        jobs, self.jobs = self.jobs, []
        for fut, fn, args, kwargs in jobs:
            if not fut.set_running_or_notify_cancel():
                continue
            try:
                fut.set_result(fn(*args, **kwargs))
            except BaseException as e:
                fut.set_exception(e)


def board_of(*rows: str) -> Board:
    return Board.from_rows(rows)


@pytest.fixture
def config() -> GameConfig:
    """Default 3x3 game, no think-time so tests control polling directly."""
    return GameConfig(ai_think_time=0.0)


@pytest.fixture
def executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def agent(config) -> MinimaxAgent:
    return MinimaxAgent(config=config)
