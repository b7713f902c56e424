from __future__ import annotations

import argparse
import csv
import dataclasses
import itertools
import logging
import random
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

from tictactoe.ai.base import Agent
from tictactoe.ai.minimax_agent import MinimaxAgent
from tictactoe.ai.random_agent import RandomAgent
from tictactoe.config import DEFAULT_CONFIG, GameConfig
from tictactoe.core.board import Board
from tictactoe.core.rules import check_win, find_any_win
from tictactoe.types import Mark

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "name",
    "games", "wins", "draws", "losses",
    "points", "ppg",
    "avg_ms_per_move",
    "moves", "time_ms", "nodes", "tt_hits",
]

GAME_COLUMNS = [
    "x", "o", "outcome", "opening_moves",
    "x_moves", "o_moves",
    "x_nodes", "o_nodes",
    "x_tt_hits", "o_tt_hits",
    "x_time_ms", "o_time_ms",
]


@dataclass(frozen=True)
class Team:
    name: str
    make: Callable[[], object]  # must be picklable (use functools.partial, not lambda)


@dataclass
class Agg:
    games: int = 0
    points: float = 0.0
    wins: int = 0
    losses: int = 0
    draws: int = 0

    moves: int = 0
    time_ms: int = 0
    nodes: int = 0
    tt_hits: int = 0


def ppg(a: Agg) -> float:
    return (a.points / a.games) if a.games else 0.0


def avg_ms_per_move(a: Agg) -> float:
    return (a.time_ms / a.moves) if a.moves else 0.0


def seed_agent(agent, seed: int) -> None:
    rng = getattr(agent, "rng", None)
    if rng is not None:
        rng.seed(seed)


SideStats = Dict[str, int]


def play_headless(
    agent_x: Agent,
    agent_o: Agent,
    config: GameConfig = DEFAULT_CONFIG,
    seed_base: int = 0,
    opening_moves: int = 0,
) -> Tuple[str, Dict[str, SideStats]]:
    """
    Play one game without a UI. Returns ("X" | "O" | "D", per-side stats).

    `opening_moves` random placements are made first so that deterministic
    agents do not replay the same game every time.
    """
    board = Board(config.side)
    current = Mark.X
    stats = {
        "X": {"moves": 0, "time_ms": 0, "nodes": 0, "tt_hits": 0},
        "O": {"moves": 0, "time_ms": 0, "nodes": 0, "tt_hits": 0},
    }

    seed_agent(agent_x, seed_base + 101)
    seed_agent(agent_o, seed_base + 202)

    rng = random.Random(seed_base)
    for _ in range(opening_moves):
        moves = board.empty_indices()
        if not moves:
            break
        board.set_index(rng.choice(moves), current)
        current = current.other
        wm = find_any_win(board, config.win_length)
        if wm is not None:
            return wm.mark.value, stats

    while True:
        agent = agent_x if current is Mark.X else agent_o
        move = agent.choose_move(board, current)
        if move is None:
            return "D", stats

        info = getattr(agent, "last_info", None) or {}
        side_stats = stats[current.value]
        side_stats["moves"] += 1
        side_stats["time_ms"] += max(1, int(info.get("time_ms", 0)))
        side_stats["nodes"] += int(info.get("nodes", 0))
        side_stats["tt_hits"] += int(info.get("tt_hits", 0))

        board.set_index(move, current)
        wm = check_win(board, move, config.win_length)
        if wm is not None:
            return wm.mark.value, stats
        if board.is_full():
            return "D", stats
        current = current.other


def add_result(agg_a: Agg, agg_b: Agg, outcome: str, a_is_x: bool) -> None:
    agg_a.games += 1
    agg_b.games += 1

    if outcome == "D":
        agg_a.draws += 1
        agg_b.draws += 1
        agg_a.points += 0.5
        agg_b.points += 0.5
        return

    a_won = (outcome == "X" and a_is_x) or (outcome == "O" and not a_is_x)
    if a_won:
        agg_a.wins += 1
        agg_b.losses += 1
        agg_a.points += 1.0
    else:
        agg_b.wins += 1
        agg_a.losses += 1
        agg_b.points += 1.0


def add_stats(agg: Agg, side_stats: SideStats) -> None:
    agg.moves += side_stats["moves"]
    agg.time_ms += side_stats["time_ms"]
    agg.nodes += side_stats["nodes"]
    agg.tt_hits += side_stats["tt_hits"]


def game_row(x_name: str, o_name: str, outcome: str, stats: Dict[str, SideStats], opening_moves: int) -> dict:
    """One line of the per-game log: who sat where, the result, and each side's search effort."""
    row = {"x": x_name, "o": o_name, "outcome": outcome, "opening_moves": opening_moves}
    for side in ("X", "O"):
        for key, value in stats[side].items():
            row[f"{side.lower()}_{key}"] = value
    return row


def _play_pair_game(args):
    (a, b, g, config, seed, opening_moves) = args
    a_is_x = g % 2 == 0
    x_team, o_team = (a, b) if a_is_x else (b, a)
    outcome, stats = play_headless(x_team.make(), o_team.make(), config, seed, opening_moves)
    return a.name, b.name, a_is_x, outcome, stats


def run_series(
    teams: Sequence[Team],
    games_per_pair: int = 2,
    config: GameConfig = DEFAULT_CONFIG,
    workers: int = 1,
    opening_moves: int = 1,
    seed: int = 0,
    games: List[dict] | None = None,
) -> Dict[str, Agg]:
    """
    Round robin between all teams, alternating who plays X.

    When `games` is given, one `game_row` per game is appended to it.
    """
    aggs: Dict[str, Agg] = {t.name: Agg() for t in teams}

    jobs = []
    for p, (a, b) in enumerate(itertools.combinations(teams, 2)):
        for g in range(games_per_pair):
            jobs.append((a, b, g, config, seed + p * 1000 + g, opening_moves))

    def record(result) -> None:
        a_name, b_name, a_is_x, outcome, stats = result
        add_result(aggs[a_name], aggs[b_name], outcome, a_is_x)
        add_stats(aggs[a_name], stats["X" if a_is_x else "O"])
        add_stats(aggs[b_name], stats["O" if a_is_x else "X"])
        if games is not None:
            x_name, o_name = (a_name, b_name) if a_is_x else (b_name, a_name)
            games.append(game_row(x_name, o_name, outcome, stats, opening_moves))

    if workers <= 1:
        for job in jobs:
            record(_play_pair_game(job))
    else:
        with ProcessPoolExecutor(max_workers=workers) as ex:
            futures = [ex.submit(_play_pair_game, job) for job in jobs]
            for fut in as_completed(futures):
                record(fut.result())

    logger.info("Series finished: %d games across %d teams.", len(jobs), len(teams))
    return aggs


def result_rows(aggs: Dict[str, Agg]) -> List[dict]:
    rows = []
    for name, a in aggs.items():
        rows.append({
            "name": name,
            "games": a.games, "wins": a.wins, "draws": a.draws, "losses": a.losses,
            "points": a.points, "ppg": round(ppg(a), 4),
            "avg_ms_per_move": round(avg_ms_per_move(a), 3),
            "moves": a.moves, "time_ms": a.time_ms, "nodes": a.nodes, "tt_hits": a.tt_hits,
        })
    rows.sort(key=lambda r: (-r["ppg"], r["avg_ms_per_move"]))
    return rows


def write_results_csv(aggs: Dict[str, Agg], results_dir: Path, stamp: str | None = None) -> Path:
    results_dir.mkdir(parents=True, exist_ok=True)
    stamp = stamp or time.strftime("%Y%m%d_%H%M%S")
    path = results_dir / f"series_results_{stamp}.csv"
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=RESULT_COLUMNS)
        w.writeheader()
        w.writerows(result_rows(aggs))
    return path


def write_games_csv(games: Sequence[dict], results_dir: Path, stamp: str | None = None) -> Path:
    results_dir.mkdir(parents=True, exist_ok=True)
    stamp = stamp or time.strftime("%Y%m%d_%H%M%S")
    path = results_dir / f"series_games_{stamp}.csv"
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=GAME_COLUMNS)
        w.writeheader()
        w.writerows(games)
    return path


def default_roster(config: GameConfig) -> List[Team]:
    return [
        Team("Minimax", partial(MinimaxAgent, name="Minimax", config=config)),
        Team(
            "Minimax (no table)",
            partial(MinimaxAgent, name="Minimax (no table)", config=dataclasses.replace(config, memoize=False)),
        ),
        Team("Random", partial(RandomAgent, name="Random")),
    ]


def print_results(aggs: Dict[str, Agg]) -> None:
    print(f"\n{'name':<22}{'games':>6}{'W':>5}{'D':>5}{'L':>5}{'ppg':>7}{'ms/move':>10}")
    print("-" * 60)
    for r in result_rows(aggs):
        print(
            f"{r['name']:<22}{r['games']:>6}{r['wins']:>5}{r['draws']:>5}{r['losses']:>5}"
            f"{r['ppg']:>7.3f}{r['avg_ms_per_move']:>10.2f}"
        )


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Run a self-play series and export results to CSV.")
    ap.add_argument("--games", type=int, default=4, help="Games per pairing (colours alternate)")
    ap.add_argument("--workers", type=int, default=1, help="Worker processes")
    ap.add_argument("--openings", type=int, default=1, help="Random opening moves per game")
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--results-dir", type=str, default="data/results", help="Where to write series_results_*.csv and series_games_*.csv")
    return ap


def main(argv: list[str] | None = None, config: GameConfig = DEFAULT_CONFIG) -> int:
    args = build_argparser().parse_args(argv)

    start = time.perf_counter()
    games: List[dict] = []
    aggs = run_series(
        default_roster(config),
        games_per_pair=args.games,
        config=config,
        workers=args.workers,
        opening_moves=args.openings,
        seed=args.seed,
        games=games,
    )
    print_results(aggs)

    results_dir = Path(args.results_dir)
    stamp = time.strftime("%Y%m%d_%H%M%S")
    path = write_results_csv(aggs, results_dir, stamp)
    games_path = write_games_csv(games, results_dir, stamp)
    print(f"\nSaved results to: {path}  ({time.perf_counter() - start:.1f}s)")
    print(f"Per-game log: {games_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
