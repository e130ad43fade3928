"""
Unit tests for the tic-tac-toe rules.
"""

import itertools

import pytest

from src.game.engine import (
    apply_move, check_winner, is_draw, new_board, other_symbol, to_cell
)
from src.utils.constants import WIN_PATTERNS, X, O


def board_from(text):
    """Build a board from a 9-char string, '.' for empty."""
    return [None if c == "." else c for c in text]


class TestCheckWinner:
    """Tests for win detection."""

    def test_empty_board(self):
        assert check_winner(new_board()) is None

    @pytest.mark.parametrize("line", WIN_PATTERNS)
    @pytest.mark.parametrize("symbol", [X, O])
    def test_every_line_wins(self, line, symbol):
        """Each of the 8 lines held by one symbol is a win."""
        board = new_board()
        for i in line:
            board[i] = symbol
        assert check_winner(board) == (symbol, list(line))

    def test_mixed_line_is_not_a_win(self):
        assert check_winner(board_from("XXO......")) is None

    def test_priority_rows_before_columns(self):
        """With two completed lines the first in order is reported."""
        board = board_from("XXXX..X..")
        assert check_winner(board) == (X, [0, 1, 2])

    def test_priority_left_column_first(self):
        board = board_from("OX.OXOOX.")
        # column 1 (1,4,7) is X, column 0 (0,3,6) is O
        assert check_winner(board) == (O, [0, 3, 6])

    def test_priority_columns_before_diagonals(self):
        board = board_from("..O.OOO.O")
        assert check_winner(board) == (O, [2, 5, 8])

    def test_matches_brute_force_on_all_boards(self):
        """A result is returned exactly when some line is full of one symbol."""
        for cells in itertools.product([None, X, O], repeat=9):
            board = list(cells)
            expected = any(
                board[a] is not None and board[a] == board[b] == board[c]
                for a, b, c in WIN_PATTERNS
            )
            assert (check_winner(board) is not None) == expected


class TestIsDraw:
    """Tests for draw detection."""

    def test_full_board_without_winner(self):
        board = board_from("XOXXOOOXX")
        assert is_draw(board, 9) is True

    def test_full_board_with_winner(self):
        board = board_from("XXXOOXOXO")
        assert is_draw(board, 9) is False

    def test_partial_board(self):
        board = board_from("XOXXOO...")
        assert is_draw(board, 6) is False

    def test_alternating_play_to_draw(self):
        """Nine legal alternating moves with no line end in a draw."""
        board = new_board()
        symbol = X
        for count, cell in enumerate([0, 1, 2, 4, 3, 5, 7, 6, 8], start=1):
            board = apply_move(board, cell, symbol)
            assert check_winner(board) is None
            symbol = other_symbol(symbol)
        assert is_draw(board, count) is True


class TestApplyMove:
    """Tests for placing a symbol."""

    def test_returns_new_board(self):
        board = new_board()
        result = apply_move(board, 4, X)
        assert result[4] == X
        assert board[4] is None

    def test_occupied_cell_raises(self):
        board = apply_move(new_board(), 4, X)
        with pytest.raises(ValueError):
            apply_move(board, 4, O)

    @pytest.mark.parametrize("cell", [-1, 9, "3", 2.5, True, None])
    def test_bad_index_raises(self, cell):
        with pytest.raises(ValueError):
            apply_move(new_board(), cell, X)


class TestHelpers:
    """Tests for small helpers."""

    def test_other_symbol(self):
        assert other_symbol(X) == O
        assert other_symbol(O) == X

    def test_to_cell_accepts_board_indices(self):
        assert [to_cell(i) for i in range(9)] == list(range(9))

    def test_to_cell_accepts_integral_floats(self):
        """JSON encoders may send 2.0 for 2."""
        assert to_cell(2.0) == 2
        assert isinstance(to_cell(2.0), int)

    @pytest.mark.parametrize("index", [9, -1, False, True, 2.5, 9.0, float("nan"), float("inf"), "4", None, [4]])
    def test_to_cell_rejects(self, index):
        assert to_cell(index) is None

    def test_apply_move_accepts_integral_float(self):
        assert apply_move(new_board(), 4.0, X)[4] == X
