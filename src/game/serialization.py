"""
Serialization utilities for room state.

Builds the per-player view that is broadcast after every change. Connection
objects and timers never leave the server.
"""
from typing import Any, Dict, Optional

from src.game.room import Room


def serialize_room_state(room: Room, symbol: Optional[str]) -> Dict[str, Any]:
    """
    Serialize a room from one player's point of view.

    Args:
        room: Room to describe
        symbol: Symbol of the player receiving the view

    Returns:
        Dict with board, turn, result, scores and presence information
    """
    return {
        "board": list(room.board),
        "current_player": room.current_player,
        "winner": room.winner,
        "winning_line": list(room.winning_line) if room.winning_line else None,
        "is_draw": room.is_draw,
        "scores": room.scores.to_dict(),
        "my_symbol": symbol,
        "opponent_connected": room.opponent_connected(symbol) if symbol else False,
        "player_count": room.player_count(),
    }

