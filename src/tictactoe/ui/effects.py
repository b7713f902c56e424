from __future__ import annotations
import sys

from tictactoe.config import AI_THINKING_SPINNER

FRAMES = ["|", "/", "-", "\\"]


def thinking_frame(label: str, i: int) -> None:
    """
    Draw one spinner frame. Called once per tick while the computer thinks,
    so the spinner never holds up the game loop.
    """
    if not AI_THINKING_SPINNER:
        return
    sys.stdout.write(f"\r{label}... {FRAMES[i % len(FRAMES)]}")
    sys.stdout.flush()


def clear_thinking(label: str) -> None:
    if not AI_THINKING_SPINNER:
        return
    sys.stdout.write("\r" + (" " * (len(label) + 10)) + "\r")
    sys.stdout.flush()
