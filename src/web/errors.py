"""
Errors reported back to the client that sent the offending message.
"""


class RoomError(Exception):
    """Base class for non-fatal room and move errors."""
    message = "Room error"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class RoomNotFound(RoomError):
    message = "Room not found"


class RoomFull(RoomError):
    message = "Room is full"


class NotYourTurn(RoomError):
    message = "Not your turn"


class InvalidMove(RoomError):
    """Out-of-range index, occupied cell, or the round is already decided."""
    message = "Invalid move"
