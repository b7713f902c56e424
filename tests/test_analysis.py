"""
Tests for the series game-log report.
"""

import dataclasses
from functools import partial

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from tictactoe.ai.minimax_agent import MinimaxAgent
from tictactoe.scripts.series import Team, run_series, write_games_csv
from tictactoe_analysis.series_report import (
    latest_games_csv,
    load_games,
    main,
    minimax_draw_rate,
    outcomes_by_pairing,
    plot_outcomes,
    plot_search_effort,
    search_effort,
    table_speedup,
)


CSV_TEXT = """x ,o,outcome,opening_moves,x_moves,o_moves,x_nodes,o_nodes,x_tt_hits,o_tt_hits,x_time_ms,o_time_ms
Minimax,Minimax (no table),D,1,4,4,2000,60000,300,0,8,120
Minimax (no table),Minimax,D,1,4,4,60000,2000,0,300,120,8
Minimax,Random,X,1,3,2,1500,0,200,0,6,2
Random,Minimax,O,1,3,3,0,1800,0,250,3,7
Random,Minimax,d,1,4,4,0,1000,0,100,4,4
,Random,X,1,0,0,0,0,0,0,0,0
Random,Minimax,?,1,0,0,0,0,0,0,0,0
"""


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "series_games_20260101_000000.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def games(csv_path):
    return load_games(csv_path)


class TestLoadGames:
    def test_loads_and_cleans(self, games):
        assert len(games) == 5
        assert list(games.columns[:3]) == ["x", "o", "outcome"]
        assert set(games["outcome"]) == {"X", "O", "D"}
        assert pd.api.types.is_numeric_dtype(games["x_nodes"])

    def test_missing_effort_columns_read_as_zero(self, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("x,o,outcome\nRandom,Random,X\n", encoding="utf-8")
        df = load_games(path)
        assert df.loc[0, "x_nodes"] == 0
        assert df.loc[0, "o_tt_hits"] == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_games(tmp_path / "nope.csv")

    def test_missing_outcome_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("x,o\nA,B\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_games(path)

    def test_latest_file(self, tmp_path, csv_path):
        newer = tmp_path / "series_games_20260202_000000.csv"
        newer.write_text(CSV_TEXT, encoding="utf-8")
        (tmp_path / "series_results_20260303_000000.csv").write_text("name\n", encoding="utf-8")
        assert latest_games_csv(tmp_path) == newer

    def test_no_files(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            latest_games_csv(tmp_path)


class TestOutcomes:
    def test_per_seating_counts(self, games):
        out = outcomes_by_pairing(games)
        assert list(zip(out["x"], out["o"])) == [
            ("Minimax", "Minimax (no table)"),
            ("Minimax", "Random"),
            ("Minimax (no table)", "Minimax"),
            ("Random", "Minimax"),
        ]
        last = out.iloc[-1]
        assert (last["games"], last["x_wins"], last["o_wins"], last["draws"]) == (2, 0, 1, 1)
        assert last["draw_rate"] == 0.5

        vs_random = out.iloc[1]
        assert (vs_random["x_wins"], vs_random["o_wins"], vs_random["draws"]) == (1, 0, 0)

    def test_minimax_variants_always_draw(self, games):
        assert minimax_draw_rate(games) == 1.0

    def test_draw_rate_counts_losses(self, games):
        assert minimax_draw_rate(games, prefix="") == pytest.approx(3 / 5)

    def test_no_minimax_games(self, games):
        assert pd.isna(minimax_draw_rate(games, prefix="Nobody"))


class TestSearchEffort:
    def test_per_agent_totals(self, games):
        eff = search_effort(games).set_index("agent")
        assert eff.loc["Minimax", "moves"] == 18
        assert eff.loc["Minimax", "nodes"] == 8300
        assert eff.loc["Minimax", "tt_hits"] == 1150
        assert eff.loc["Minimax (no table)", "nodes_per_move"] == 15000
        assert eff.loc["Minimax (no table)", "tt_hits_per_move"] == 0
        assert eff.loc["Random", "nodes"] == 0

    def test_sorted_cheapest_first(self, games):
        assert list(search_effort(games)["agent"]) == ["Random", "Minimax", "Minimax (no table)"]

    def test_table_speedup(self, games):
        eff = search_effort(games)
        assert table_speedup(eff, "Minimax", "Minimax (no table)") == pytest.approx(15000 / (8300 / 18))

    def test_speedup_unknown_agent(self, games):
        assert pd.isna(table_speedup(search_effort(games), "Minimax", "Alpha-beta"))

    def test_speedup_without_searching_agent(self, games):
        assert pd.isna(table_speedup(search_effort(games), "Random", "Minimax"))


class TestPlots:
    def test_saves_figures(self, games, tmp_path):
        outdir = tmp_path / "figs"
        assert plot_outcomes(outcomes_by_pairing(games), outdir, show=False).exists()
        assert plot_search_effort(search_effort(games), outdir, show=False).exists()

    def test_nothing_to_plot(self, games, tmp_path):
        random_only = games[(games["x"] == "Random") & (games["o"] == "Random")]
        assert plot_outcomes(outcomes_by_pairing(random_only), tmp_path, show=False) is None
        no_search = search_effort(games)
        no_search = no_search[no_search["agent"] == "Random"]
        assert plot_search_effort(no_search, tmp_path, show=False) is None


class TestCli:
    def test_tables_only(self, csv_path, capsys):
        assert main(["--csv", str(csv_path), "--no-plots"]) == 0
        out = capsys.readouterr().out
        assert "Draw rate between minimax variants: 100.0%" in out
        assert "Search effort" in out

    def test_latest_with_plots(self, csv_path, tmp_path):
        outdir = tmp_path / "figs"
        assert main(["--results-dir", str(tmp_path), "--outdir", str(outdir)]) == 0
        assert (outdir / "outcomes_by_pairing.png").exists()
        assert (outdir / "nodes_per_move.png").exists()


class TestRealSeries:
    def test_minimax_series_report(self, config, tmp_path):
        teams = [
            Team("Minimax", partial(MinimaxAgent, name="Minimax", config=config)),
            Team(
                "Minimax (no table)",
                partial(MinimaxAgent, name="Minimax (no table)", config=dataclasses.replace(config, memoize=False)),
            ),
        ]
        log = []
        run_series(teams, games_per_pair=2, config=config, opening_moves=1, games=log)
        df = load_games(write_games_csv(log, tmp_path))

        assert minimax_draw_rate(df) == 1.0
        eff = search_effort(df).set_index("agent")
        assert eff.loc["Minimax", "tt_hits"] > 0
        assert eff.loc["Minimax (no table)", "tt_hits"] == 0
        assert table_speedup(eff.reset_index(), "Minimax", "Minimax (no table)") > 1
