"""
Tic-tac-toe rules.

Pure functions over a 9-cell board. A board is a list where each cell is
either None or a player symbol; nothing here mutates its arguments.
"""
from typing import List, Optional, Tuple

from src.utils.constants import BOARD_CELLS, WIN_PATTERNS, X, O

Board = List[Optional[str]]


def new_board() -> Board:
    """Return an empty board."""
    return [None] * BOARD_CELLS


def other_symbol(symbol: str) -> str:
    """Return the opposing symbol."""
    return O if symbol == X else X


def to_cell(index) -> Optional[int]:
    """
    Convert a client-supplied index to a board cell.

    Ints and integral floats (JSON `2.0`) in 0-8 are accepted.

    Returns:
        The cell as an int, or None if index does not address a cell
    """
    # bool is an int subclass but never a cell index
    if isinstance(index, bool):
        return None
    if isinstance(index, float):
        if not index.is_integer():
            return None
        index = int(index)
    if not isinstance(index, int) or not 0 <= index < BOARD_CELLS:
        return None
    return index


def apply_move(board: Board, cell: int, symbol: str) -> Board:
    """
    Place a symbol on the board.

    Args:
        board: Current board
        cell: Index of an empty cell
        symbol: Symbol to place

    Returns:
        A new board with the symbol placed

    Raises:
        ValueError: If the cell is out of range or already occupied
    """
    index = to_cell(cell)
    if index is None:
        raise ValueError(f"Cell out of range: {cell!r}")
    if board[index] is not None:
        raise ValueError(f"Cell {cell} is already occupied")

    new = list(board)
    new[index] = symbol
    return new


def check_winner(board: Board) -> Optional[Tuple[str, List[int]]]:
    """
    Find the first completed line.

    Returns:
        (symbol, [a, b, c]) for the first line in WIN_PATTERNS held entirely
        by one symbol, or None
    """
    for a, b, c in WIN_PATTERNS:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a], [a, b, c]
    return None


def is_draw(board: Board, move_count: int) -> bool:
    """A full board with no winner."""
    return move_count == BOARD_CELLS and check_winner(board) is None
