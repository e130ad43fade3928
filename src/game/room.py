"""
Room state for a single two-player game.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.game.engine import Board, new_board
from src.utils.constants import SYMBOLS, X


@dataclass
class Scores:
    """Running tally across rounds."""
    X: int = 0
    O: int = 0
    draws: int = 0

    def record_win(self, symbol: str):
        setattr(self, symbol, getattr(self, symbol) + 1)

    def record_draw(self):
        self.draws += 1

    def to_dict(self) -> Dict[str, int]:
        return {"X": self.X, "O": self.O, "draws": self.draws}


def _empty_slots() -> Dict[str, Any]:
    return {symbol: None for symbol in SYMBOLS}


@dataclass
class Room:
    """
    An isolated game identified by a short code.

    `players` maps each symbol to the connection holding that slot (or None),
    and `disconnect_timers` maps each symbol to the pending grace timer for a
    vacated slot.
    """
    code: str
    last_activity: float
    board: Board = field(default_factory=new_board)
    current_player: str = X
    winner: Optional[str] = None
    winning_line: Optional[List[int]] = None
    is_draw: bool = False
    move_count: int = 0
    scores: Scores = field(default_factory=Scores)
    players: Dict[str, Any] = field(default_factory=_empty_slots)
    disconnect_timers: Dict[str, Optional[asyncio.TimerHandle]] = field(default_factory=_empty_slots)

    @property
    def is_finished(self) -> bool:
        return self.winner is not None or self.is_draw

    def touch(self, now: float):
        self.last_activity = now

    def available_symbol(self) -> Optional[str]:
        """First empty slot, X before O."""
        for symbol in SYMBOLS:
            if self.players[symbol] is None:
                return symbol
        return None

    def player_count(self) -> int:
        return sum(1 for symbol in SYMBOLS if self.players[symbol] is not None)

    def opponent_connected(self, symbol: str) -> bool:
        return any(
            self.players[other] is not None
            for other in SYMBOLS if other != symbol
        )

    def clear_board(self, clear_scores: bool = False):
        """Start a fresh round. Scores survive unless clear_scores is set."""
        self.board = new_board()
        self.current_player = X
        self.winner = None
        self.winning_line = None
        self.is_draw = False
        self.move_count = 0
        if clear_scores:
            self.scores = Scores()

    def timer_symbol(self, handle) -> Optional[str]:
        """Slot a pending grace timer currently belongs to."""
        for symbol in SYMBOLS:
            if handle is not None and self.disconnect_timers[symbol] is handle:
                return symbol
        return None

    def cancel_timer(self, symbol: str):
        timer = self.disconnect_timers[symbol]
        if timer is not None:
            timer.cancel()
            self.disconnect_timers[symbol] = None

    def cancel_timers(self):
        for symbol in SYMBOLS:
            self.cancel_timer(symbol)
