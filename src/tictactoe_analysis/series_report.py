from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd


OUTCOMES = ("X", "O", "D")
EFFORT_KEYS = ("moves", "nodes", "tt_hits", "time_ms")
REQUIRED_COLS = ("x", "o", "outcome")


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def latest_games_csv(results_dir: Path, pattern: str = "series_games_*.csv") -> Path:
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    files = sorted(results_dir.glob(pattern))
    if not files:
        raise FileNotFoundError(f"No files matching {pattern} in {results_dir}")

    # Timestamped names sort chronologically
    return files[-1]


def load_games(csv_path: Path) -> pd.DataFrame:
    """
    Per-game series log as written by `tictactoe.scripts.series.write_games_csv`.

    Rows without both player names or with an unknown outcome are dropped.
    Missing effort columns read as zero so that logs from agents without
    search stats still load.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)
    df.columns = [c.strip() for c in df.columns]

    missing = [c for c in REQUIRED_COLS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV missing required columns {missing}. Columns: {list(df.columns)}")

    for c in REQUIRED_COLS:
        df[c] = df[c].fillna("").astype(str).str.strip()
    df["outcome"] = df["outcome"].str.upper()

    keep = df["x"].str.len().gt(0) & df["o"].str.len().gt(0) & df["outcome"].isin(OUTCOMES)
    df = df[keep].copy()

    for side in ("x", "o"):
        for key in EFFORT_KEYS:
            col = f"{side}_{key}"
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)
            else:
                df[col] = 0

    return df.reset_index(drop=True)


def outcomes_by_pairing(df: pd.DataFrame) -> pd.DataFrame:
    """X wins / O wins / draws for every (X player, O player) seating."""
    counts = (
        df.assign(
            x_wins=df["outcome"].eq("X").astype(int),
            o_wins=df["outcome"].eq("O").astype(int),
            draws=df["outcome"].eq("D").astype(int),
        )
        .groupby(["x", "o"], as_index=False)[["x_wins", "o_wins", "draws"]]
        .sum()
    )
    counts["games"] = counts["x_wins"] + counts["o_wins"] + counts["draws"]
    counts["draw_rate"] = counts["draws"] / counts["games"]
    cols = ["x", "o", "games", "x_wins", "o_wins", "draws", "draw_rate"]
    return counts[cols].sort_values(["x", "o"]).reset_index(drop=True)


def minimax_draw_rate(df: pd.DataFrame, prefix: str = "Minimax") -> float:
    """
    Share of drawn games among those where both seats are minimax variants.
    After at most one random opening move, perfect play on both sides
    always draws, so anything below 1.0 points at a search bug. NaN when
    no such game was played.
    """
    both = df["x"].str.startswith(prefix) & df["o"].str.startswith(prefix)
    games = df[both]
    if games.empty:
        return float("nan")
    return float(games["outcome"].eq("D").mean())


def search_effort(df: pd.DataFrame) -> pd.DataFrame:
    """Moves, nodes, table hits and time per agent, over both seats, with per-move rates."""
    parts = []
    for side in ("x", "o"):
        cols = [side] + [f"{side}_{key}" for key in EFFORT_KEYS]
        parts.append(df[cols].set_axis(["agent", *EFFORT_KEYS], axis=1))

    both = pd.concat(parts, ignore_index=True)
    eff = both.groupby("agent", as_index=False)[list(EFFORT_KEYS)].sum()
    eff = eff[eff["moves"] > 0].copy()

    eff["nodes_per_move"] = eff["nodes"] / eff["moves"]
    eff["tt_hits_per_move"] = eff["tt_hits"] / eff["moves"]
    eff["ms_per_move"] = eff["time_ms"] / eff["moves"]
    return eff.sort_values(["nodes_per_move", "agent"]).reset_index(drop=True)


def table_speedup(effort: pd.DataFrame, with_table: str, without_table: str) -> float:
    """How many times more nodes per move the search needs without its transposition table."""
    per_move = effort.set_index("agent")["nodes_per_move"]
    if with_table not in per_move.index or without_table not in per_move.index:
        return float("nan")
    if per_move[with_table] == 0:
        return float("nan")
    return float(per_move[without_table] / per_move[with_table])


def plot_outcomes(outcomes: pd.DataFrame, outdir: Path, *, show: bool) -> Optional[Path]:
    if outcomes.empty:
        return None

    if not show:
        _ensure_dir(outdir)

    labels = list(outcomes["x"] + " vs " + outcomes["o"])
    bottom = None
    fig = plt.figure(figsize=(10, 5))
    for col, label in (("x_wins", "X wins"), ("o_wins", "O wins"), ("draws", "draws")):
        heights = outcomes[col].to_numpy(dtype=float)
        plt.bar(labels, heights, bottom=bottom, label=label)
        bottom = heights if bottom is None else bottom + heights
    plt.title("Results per seating (X vs O)")
    plt.ylabel("games")
    plt.xticks(rotation=45, ha="right")
    plt.legend()

    if show:
        plt.show()
        return None
    path = outdir / "outcomes_by_pairing.png"
    fig.savefig(path, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return path


def plot_search_effort(effort: pd.DataFrame, outdir: Path, *, show: bool) -> Optional[Path]:
    searched = effort[effort["nodes_per_move"] > 0]
    if searched.empty:
        return None

    if not show:
        _ensure_dir(outdir)

    fig = plt.figure()
    plt.bar(searched["agent"].astype(str), searched["nodes_per_move"].astype(float))
    plt.yscale("log")
    plt.title("Nodes searched per move")
    plt.xlabel("agent")
    plt.ylabel("nodes / move (log)")
    plt.xticks(rotation=45, ha="right")

    if show:
        plt.show()
        return None
    path = outdir / "nodes_per_move.png"
    fig.savefig(path, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return path


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Summarize a self-play series game log.")
    ap.add_argument("--csv", type=str, default=None, help="Path to a games CSV. If omitted, uses latest in --results-dir.")
    ap.add_argument("--results-dir", type=str, default="data/results", help="Directory containing series_games_*.csv")
    ap.add_argument("--outdir", type=str, default="figures", help="Directory for saving plots")
    ap.add_argument("--show", action="store_true", help="Show plots instead of saving")
    ap.add_argument("--no-plots", action="store_true", help="Print tables only")
    ap.add_argument("--with-table", type=str, default="Minimax", help="Agent searching with its transposition table")
    ap.add_argument("--without-table", type=str, default="Minimax (no table)", help="Same search without the table")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)

    csv_path = Path(args.csv) if args.csv else latest_games_csv(Path(args.results_dir))
    df = load_games(csv_path)
    print(f"\nLoaded: {csv_path}  ({len(df):,} games)")

    outcomes = outcomes_by_pairing(df)
    print("\n=== Results per seating ===")
    print(outcomes.to_string(index=False))

    rate = minimax_draw_rate(df)
    if pd.isna(rate):
        print("\nNo minimax-vs-minimax games.")
    else:
        print(f"\nDraw rate between minimax variants: {rate:.1%}")

    effort = search_effort(df)
    print("\n=== Search effort ===")
    print(effort.to_string(index=False))

    speedup = table_speedup(effort, args.with_table, args.without_table)
    if not pd.isna(speedup):
        print(f"\n'{args.without_table}' searches {speedup:.1f}x the nodes of '{args.with_table}' per move.")

    if args.no_plots:
        return 0

    outdir = Path(args.outdir)
    saved = [
        plot_outcomes(outcomes, outdir, show=args.show),
        plot_search_effort(effort, outdir, show=args.show),
    ]
    for path in saved:
        if path is not None:
            print(f"Saved figure: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
