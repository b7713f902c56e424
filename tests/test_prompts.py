"""
Tests for terminal move parsing.
"""

import pytest

from tictactoe.types import Position
from tictactoe.ui.prompts import parse_move


class TestParseMove:
    @pytest.mark.parametrize("raw", ["q", "quit", " EXIT "])
    def test_quit(self, raw):
        assert parse_move(raw, 3) is None

    @pytest.mark.parametrize(
        "raw, expected",
        [("1", Position(0, 0)), ("5", Position(1, 1)), ("9", Position(2, 2)), (" 6 ", Position(1, 2))],
    )
    def test_cell_number(self, raw, expected):
        assert parse_move(raw, 3) == expected

    @pytest.mark.parametrize("raw", ["2 3", "2,3", " 2 , 3 "])
    def test_row_col(self, raw):
        assert parse_move(raw, 3) == Position(1, 2)

    @pytest.mark.parametrize("raw", ["0", "10", "4 1", "1 0", "abc", "", "1 2 3", "-1"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_move(raw, 3)

    def test_larger_board(self):
        assert parse_move("16", 4) == Position(3, 3)
