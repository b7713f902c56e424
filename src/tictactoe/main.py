from __future__ import annotations

import argparse
import dataclasses
import logging
import time

from tictactoe.config import DEFAULT_CONFIG, GameConfig
from tictactoe.game.controller import run_game
from tictactoe.game.session import GameSession


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Play N-in-a-row against a human or the computer.")
    ap.add_argument("--side", type=int, default=DEFAULT_CONFIG.side, help="Board side length")
    ap.add_argument("--win-length", type=int, default=DEFAULT_CONFIG.win_length, help="Marks in a row needed to win")
    ap.add_argument("--computer-first", action="store_true", help="Computer plays X and moves first")
    ap.add_argument("--think-time", type=float, default=DEFAULT_CONFIG.ai_think_time, help="Minimum computer think time (s)")
    ap.add_argument("--no-memo", action="store_true", help="Disable the search transposition table")
    ap.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    return ap


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return dataclasses.replace(
        DEFAULT_CONFIG,
        side=args.side,
        win_length=args.win_length,
        player_starts=not args.computer_first,
        ai_think_time=args.think_time,
        memoize=not args.no_memo,
    )


def _play(config: GameConfig) -> None:
    session = GameSession(config)
    try:
        run_game(session)
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = config_from_args(args)

    print("Select mode:")
    print("1) Human vs Human")
    print("2) Human vs Computer")
    print("3) Computer self-play series")

    choice = input("Choice: ").strip()

    if choice == "1":
        print("\nStarting game: Human vs Human")
        print("Game will start in 3 seconds...\n")
        time.sleep(3)
        _play(dataclasses.replace(config, use_ai=False))
        return

    if choice == "2":
        print("\nStarting game: Human vs Computer")
        print("Game will start in 3 seconds...\n")
        time.sleep(3)
        _play(dataclasses.replace(config, use_ai=True))
        return

    if choice == "3":
        from tictactoe.scripts.series import main as series_main

        series_main([], config=config)
        return

    print("\nInvalid choice. Defaulting to Human vs Human.\n")
    time.sleep(3)
    _play(dataclasses.replace(config, use_ai=False))


if __name__ == "__main__":
    main()
