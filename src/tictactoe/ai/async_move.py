from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional, Protocol

from tictactoe.core.board import Board
from tictactoe.types import CellIndex, Mark

logger = logging.getLogger(__name__)


class MoveSearch(Protocol):
    def best_move(self, board: Board, mark: Mark) -> Optional[CellIndex]:
        ...


class AsyncMoveComputer:
    """
    Runs a move search in the background and hands the result out through
    `poll`, which never blocks.

    The search always works on a copy of the board taken in `start`, so the
    caller is free to keep using its own board. Only one computation is
    outstanding at a time: starting a new one drops the previous result.
    """

    def __init__(self, search: MoveSearch, executor: Executor | None = None) -> None:
        self.search = search
        self._owns_executor = executor is None
        self._executor: Executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="move-search"
        )
        self._future: Future | None = None

    @property
    def pending(self) -> bool:
        """True from `start` until the result has been consumed or discarded."""
        return self._future is not None

    def start(self, board: Board, mark: Mark) -> None:
        self.discard()
        snapshot = board.copy()
        self._future = self._executor.submit(self.search.best_move, snapshot, mark)

    def poll(self, min_think_elapsed: bool) -> Optional[CellIndex]:
        """
        The computed cell once the search is done and the think-time has
        passed, else None. A failed search re-raises here.
        """
        fut = self._future
        if fut is None or not min_think_elapsed:
            return None
        if not fut.done():
            logger.debug("Think time elapsed, still waiting for the search.")
            return None

        self._future = None
        return fut.result()

    def discard(self) -> None:
        fut = self._future
        self._future = None
        if fut is not None and not fut.cancel() and not fut.done():
            # Already running: the single worker finishes it and the result is dropped.
            logger.debug("Detached a running search.")

    def shutdown(self) -> None:
        self.discard()
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "AsyncMoveComputer":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
