"""
Room registry for the web interface.

Owns every live room, generates room codes, applies moves and round
restarts, and evicts rooms that have gone quiet.
"""
import asyncio
import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

from src.game.engine import apply_move, check_winner, is_draw, other_symbol, to_cell
from src.game.room import Room
from src.utils.constants import (
    CODE_ALPHABET, CODE_LENGTH, ROOM_TTL_SEC, SWEEP_INTERVAL_SEC, X, O
)
from src.web.errors import InvalidMove, NotYourTurn

logger = logging.getLogger(__name__)


class RoomManager:
    """
    Manages active rooms.

    Handles room creation and lookup, move execution, round restarts and
    inactivity cleanup. All methods are synchronous and are expected to run
    on a single event loop.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        ttl: float = ROOM_TTL_SEC
    ):
        """
        Initialize room manager.

        Args:
            rng: Random source for codes and symbol assignment
            clock: Returns the current wall-clock time in seconds
            ttl: Seconds of inactivity before a room is swept
        """
        self.rooms: Dict[str, Room] = {}
        self.rng = rng or random.Random()
        self.clock = clock
        self.ttl = ttl

    def _generate_code(self) -> str:
        while True:
            code = "".join(self.rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
            if code not in self.rooms:
                return code

    def create_room(self) -> Room:
        """Create and register an empty room under a fresh code."""
        room = Room(code=self._generate_code(), last_activity=self.clock())
        self.rooms[room.code] = room
        return room

    def get_room(self, code: Any) -> Optional[Room]:
        """Look up a room; codes are trimmed and case-insensitive."""
        if code is None:
            return None
        return self.rooms.get(str(code).strip().upper())

    def remove_room(self, code: str) -> Optional[Room]:
        """Unregister a room and cancel its pending timers."""
        room = self.rooms.pop(code, None)
        if room:
            room.cancel_timers()
        return room

    def choose_symbol(self) -> str:
        """Pick X or O with equal probability."""
        return X if self.rng.random() < 0.5 else O

    def make_move(self, room: Room, symbol: str, index: Any):
        """
        Place a symbol for the given player.

        Args:
            room: Room to play in
            symbol: Symbol of the player moving
            index: Board cell 0-8

        Raises:
            NotYourTurn: If it is the other player's turn
            InvalidMove: If the index is bad, the cell is taken or the round
                is already decided
        """
        if room.current_player != symbol:
            raise NotYourTurn()
        cell = to_cell(index)
        if cell is None or room.board[cell] is not None or room.is_finished:
            raise InvalidMove()

        room.board = apply_move(room.board, cell, symbol)
        room.move_count += 1
        room.touch(self.clock())

        result = check_winner(room.board)
        if result:
            room.winner, room.winning_line = result
            room.scores.record_win(room.winner)
        elif is_draw(room.board, room.move_count):
            room.is_draw = True
            room.scores.record_draw()
        else:
            room.current_player = other_symbol(room.current_player)

    def restart_room(self, room: Room, clear_scores: bool = False):
        """
        Start a new round and reshuffle seats.

        Whoever holds X after the shuffle moves first. Pending grace timers
        follow their slot.
        """
        room.clear_board(clear_scores=clear_scores)
        if self.rng.random() < 0.5:
            room.players[X], room.players[O] = room.players[O], room.players[X]
            room.disconnect_timers[X], room.disconnect_timers[O] = (
                room.disconnect_timers[O], room.disconnect_timers[X]
            )
        room.touch(self.clock())

    def sweep(self, now: Optional[float] = None) -> List[str]:
        """
        Remove rooms idle for longer than the TTL.

        Returns:
            Codes of the removed rooms
        """
        if now is None:
            now = self.clock()
        expired = [
            code for code, room in self.rooms.items()
            if now - room.last_activity > self.ttl
        ]
        for code in expired:
            logger.info("Cleaning up room %s", code)
            self.remove_room(code)
        return expired

    async def run_sweeper(self, interval: float = SWEEP_INTERVAL_SEC):
        """Sweep on a fixed period until cancelled."""
        while True:
            await asyncio.sleep(interval)
            self.sweep()

