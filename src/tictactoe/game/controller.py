from __future__ import annotations

import time

from tictactoe.config import TICK_SEC
from tictactoe.game.session import GameSession
from tictactoe.types import Mark
from tictactoe.ui.effects import clear_thinking, thinking_frame
from tictactoe.ui.prompts import parse_move
from tictactoe.ui.render import render


def _header(session: GameSession) -> str:
    cfg = session.config
    if cfg.use_ai:
        x_name = "Human" if cfg.player_mark is Mark.X else "Computer"
        o_name = "Computer" if x_name == "Human" else "Human"
    else:
        x_name = o_name = "Human"
    return f"X: {x_name} | O: {o_name} | {cfg.win_length} in a row"


def _show(session: GameSession) -> None:
    s = session.state
    render(session.board, f"{_header(session)}\n{s.last_status}", winning_move=s.winning_move)


def run_game(session: GameSession) -> None:
    """
    Drive the session from the terminal until the player quits.

    A finished match restarts by itself after the configured delay.
    """
    label = "Computer is thinking"
    last = time.monotonic()
    frame = 0

    while True:
        now = time.monotonic()
        elapsed = now - last
        last = now

        s = session.state

        if s.ended:
            _show(session)
            print(f"\n   {s.end_message}  Next game starts shortly...")
            while not session.tick(TICK_SEC):
                time.sleep(TICK_SEC)
            last = time.monotonic()
            continue

        if session.computer_to_move:
            outcome = session.poll_automated_move(elapsed)
            if outcome is None:
                if frame == 0:
                    _show(session)
                thinking_frame(label, frame)
                frame += 1
                time.sleep(TICK_SEC)
                continue
            clear_thinking(label)
            frame = 0
            continue

        _show(session)
        try:
            pos = parse_move(input(f"Player {s.current} move: "), session.config.side)
        except ValueError as e:
            s.last_status = str(e)
            continue
        if pos is None:
            s.last_status = "Game quit."
            _show(session)
            return

        session.place_player_move(pos)
        # Human think time must not count toward the computer's pause
        last = time.monotonic()
