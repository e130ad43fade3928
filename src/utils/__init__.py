"""
Utilities module for the tic-tac-toe room server.
"""
from src.utils.constants import (
    BOARD_SIZE, BOARD_CELLS, X, O, SYMBOLS, WIN_PATTERNS,
    CODE_ALPHABET, CODE_LENGTH,
    ROOM_TTL_SEC, SWEEP_INTERVAL_SEC, DISCONNECT_GRACE_SEC
)

__all__ = [
    'BOARD_SIZE', 'BOARD_CELLS', 'X', 'O', 'SYMBOLS', 'WIN_PATTERNS',
    'CODE_ALPHABET', 'CODE_LENGTH',
    'ROOM_TTL_SEC', 'SWEEP_INTERVAL_SEC', 'DISCONNECT_GRACE_SEC'
]
