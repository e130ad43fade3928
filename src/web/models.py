"""
Pydantic models for the WebSocket protocol.

Every message is a JSON object with a `type` discriminator. Field names are
snake_case in Python and camelCase on the wire.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for everything that crosses the socket."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RoomState(WireModel):
    """A room as seen by one player."""
    board: List[Optional[str]]
    current_player: str
    winner: Optional[str] = None
    winning_line: Optional[List[int]] = None
    is_draw: bool = False
    scores: Dict[str, int]
    my_symbol: Optional[str] = None
    opponent_connected: bool = False
    player_count: int = Field(ge=0, le=2)


class HealthResponse(BaseModel):
    """Response for the health check."""
    status: str = "ok"
    rooms: int


# Client -> server

class WSMessage(WireModel):
    """Base WebSocket message."""
    type: str


class WSJoinRoom(WSMessage):
    """Join an existing room by code."""
    type: str = "join"
    code: Any = ""


class WSMakeMove(WSMessage):
    """Place the sender's symbol. Index is validated by the room manager."""
    type: str = "move"
    index: Any = None


# Server -> client

class WSRoomCreated(WSMessage):
    type: str = "created"
    code: str
    symbol: str


class WSRoomJoined(WSMessage):
    type: str = "joined"
    code: str
    symbol: str


class WSRoomState(WSMessage):
    type: str = "state"
    payload: RoomState


class WSError(WSMessage):
    type: str = "error"
    message: str


class WSOpponentLeft(WSMessage):
    """Opponent dropped; they have grace_period seconds to come back."""
    type: str = "opponentLeft"
    grace_period: int


class WSRoomClosed(WSMessage):
    type: str = "roomClosed"
    reason: str


class WSSymbolUpdate(WSMessage):
    """Sent to each player after symbols are reshuffled."""
    type: str = "symbolUpdate"
    symbol: str
