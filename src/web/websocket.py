"""
WebSocket handlers for real-time game communication.
"""
import asyncio
import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from src.game.room import Room
from src.game.serialization import serialize_room_state
from src.utils.constants import (
    DISCONNECT_GRACE_SEC, OUTBOUND_QUEUE_SIZE, ROOM_CLOSED_REASON, STALLED_CLOSE_CODE, SYMBOLS
)
from src.web.errors import RoomError, RoomFull, RoomNotFound
from src.web.models import (
    RoomState, WireModel, WSError, WSJoinRoom, WSMakeMove, WSMessage, WSOpponentLeft,
    WSRoomClosed, WSRoomCreated, WSRoomJoined, WSRoomState, WSSymbolUpdate
)
from src.web.room_manager import RoomManager

logger = logging.getLogger(__name__)


class PlayerConnection:
    """
    One client socket with a fire-and-forget outbound queue.

    send() never waits on the network; a writer task drains the queue so a
    slow or dead peer cannot hold up room updates for anyone else.
    """

    def __init__(self, websocket: WebSocket, max_queue: int = OUTBOUND_QUEUE_SIZE):
        self.websocket = websocket
        self.queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue(maxsize=max_queue)
        self.closed = False
        self.writer: Optional[asyncio.Task] = None
        self.closer: Optional[asyncio.Task] = None

    @property
    def is_open(self) -> bool:
        return not self.closed and self.websocket.client_state == WebSocketState.CONNECTED

    def start(self):
        self.writer = asyncio.create_task(self._drain())

    def send(self, message: Dict[str, Any]):
        if not self.is_open:
            return
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Closing stalled connection, %d messages unsent", self.queue.qsize())
            self.closed = True
            if self.writer:
                self.writer.cancel()
            self.closer = asyncio.create_task(self._close_socket())

    async def _close_socket(self):
        try:
            await self.websocket.close(code=STALLED_CLOSE_CODE)
        except Exception as exc:
            logger.debug("Close of stalled connection failed: %s", exc)

    async def _drain(self):
        while True:
            message = await self.queue.get()
            try:
                await self.websocket.send_json(message)
            except Exception as exc:
                logger.warning("Dropping connection after failed send: %s", exc)
                self.closed = True
                return

    async def close(self):
        self.closed = True
        if self.writer and not self.writer.done():
            self.writer.cancel()
            try:
                await self.writer
            except asyncio.CancelledError:
                pass


@dataclass
class PlayerSession:
    """Which seat a connection holds."""
    room_code: str
    symbol: str


class ConnectionManager:
    """Tracks live connections and the room seat each one holds."""

    def __init__(self, room_manager: RoomManager):
        self.room_manager = room_manager
        # Map connection -> seat
        self.sessions: Dict[Any, PlayerSession] = {}

    async def connect(self, websocket: WebSocket) -> PlayerConnection:
        """Accept a WebSocket and start its writer."""
        await websocket.accept()
        connection = PlayerConnection(websocket)
        connection.start()
        return connection

    async def disconnect(self, connection: PlayerConnection):
        """Forget a connection and stop its writer."""
        self.sessions.pop(connection, None)
        await connection.close()

    def bind(self, connection, room: Room, symbol: str):
        self.sessions[connection] = PlayerSession(room.code, symbol)

    def unbind(self, connection):
        self.sessions.pop(connection, None)

    def get_room(self, connection) -> Optional[Room]:
        """
        Room the connection is seated in.

        A session is stale once its room is gone (or the code now belongs
        to a different room) or its seat is held by someone else.
        """
        session = self.sessions.get(connection)
        if session is None:
            return None
        room = self.room_manager.get_room(session.room_code)
        if room is None or room.players.get(session.symbol) is not connection:
            return None
        return room

    def get_symbol(self, connection) -> Optional[str]:
        session = self.sessions.get(connection)
        return session.symbol if session else None

    def send_personal(self, connection, message: WireModel):
        """Send a message to a single connection; no-op if it is gone."""
        if connection is not None and connection.is_open:
            connection.send(message.to_wire())

    def broadcast_state(self, room: Room):
        """Send every seated player their own view of the room."""
        for symbol in SYMBOLS:
            connection = room.players[symbol]
            if connection is None:
                continue
            state = RoomState(**serialize_room_state(room, symbol))
            self.send_personal(connection, WSRoomState(payload=state))


class GameWebSocketHandler:
    """Handles WebSocket messages and disconnects for rooms."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        grace_period: float = DISCONNECT_GRACE_SEC
    ):
        self.manager = connection_manager
        self.room_manager = connection_manager.room_manager
        self.grace_period = grace_period

    def handle_message(self, connection, raw):
        """
        Handle an incoming WebSocket frame.

        Unparseable or untyped frames are dropped without a reply.

        Args:
            connection: Sending connection
            raw: JSON text or bytes
        """
        try:
            data = json.loads(raw)
            message = WSMessage.model_validate(data)
        except (TypeError, ValueError, RecursionError, ValidationError):
            logger.debug("Dropping malformed message: %r", raw[:200])
            return

        handlers = {
            "create": self.handle_create,
            "join": self.handle_join,
            "move": self.handle_move,
            "reset": self.handle_reset,
            "new": self.handle_new,
        }

        handler = handlers.get(message.type)
        if handler is None:
            logger.debug("Dropping message of unknown type %r", message.type)
            return

        try:
            handler(connection, data)
        except ValidationError:
            logger.debug("Dropping invalid %s message: %r", message.type, data)
        except RoomError as e:
            self.send_error(connection, e.message)

    def handle_create(self, connection, data: dict):
        """Create a room and seat the sender at random."""
        self._release(connection)

        room = self.room_manager.create_room()
        symbol = self.room_manager.choose_symbol()
        room.players[symbol] = connection
        self.manager.bind(connection, room, symbol)

        self.manager.send_personal(connection, WSRoomCreated(code=room.code, symbol=symbol))
        self.manager.broadcast_state(room)
        logger.info("Room %s created, host assigned %s", room.code, symbol)

    def handle_join(self, connection, data: dict):
        """Seat the sender in the first free slot of an existing room."""
        request = WSJoinRoom.model_validate(data)

        room = self.room_manager.get_room(request.code)
        if room is None:
            raise RoomNotFound()
        if self.manager.get_room(connection) is room:
            # Already seated here; keep the slot and resend the view
            symbol = self.manager.get_symbol(connection)
            self.manager.send_personal(connection, WSRoomJoined(code=room.code, symbol=symbol))
            self.manager.broadcast_state(room)
            return
        if room.available_symbol() is None:
            raise RoomFull()

        self._release(connection)
        symbol = room.available_symbol()
        room.cancel_timer(symbol)
        room.players[symbol] = connection
        room.touch(self.room_manager.clock())
        self.manager.bind(connection, room, symbol)

        self.manager.send_personal(connection, WSRoomJoined(code=room.code, symbol=symbol))
        self.manager.broadcast_state(room)
        logger.info("%s joined room %s", symbol, room.code)

    def handle_move(self, connection, data: dict):
        """Apply a move and broadcast the result."""
        request = WSMakeMove.model_validate(data)

        room = self.manager.get_room(connection)
        if room is None:
            self.manager.unbind(connection)
            raise RoomNotFound()

        symbol = self.manager.get_symbol(connection)
        self.room_manager.make_move(room, symbol, request.index)
        self.manager.broadcast_state(room)

        if room.winner:
            logger.info("Room %s won by %s", room.code, room.winner)
        elif room.is_draw:
            logger.info("Room %s ended in a draw", room.code)

    def handle_reset(self, connection, data: dict):
        """Next round, scores kept."""
        self._restart(connection, clear_scores=False)

    def handle_new(self, connection, data: dict):
        """Fresh match, scores cleared."""
        self._restart(connection, clear_scores=True)

    def _restart(self, connection, clear_scores: bool):
        room = self.manager.get_room(connection)
        if room is None:
            self.manager.unbind(connection)
            return

        self.room_manager.restart_room(room, clear_scores=clear_scores)
        for symbol in SYMBOLS:
            player = room.players[symbol]
            if player is None:
                continue
            self.manager.bind(player, room, symbol)
            self.manager.send_personal(player, WSSymbolUpdate(symbol=symbol))
        self.manager.broadcast_state(room)

    def handle_disconnect(self, connection):
        """Vacate the connection's seat and start the grace timer."""
        room = self.manager.get_room(connection)
        symbol = self.manager.get_symbol(connection)
        self.manager.unbind(connection)
        if room is None:
            return

        room.players[symbol] = None
        for other in SYMBOLS:
            if other != symbol and room.players[other] is not None:
                self.manager.send_personal(
                    room.players[other],
                    WSOpponentLeft(grace_period=math.ceil(self.grace_period))
                )

        self._start_grace_timer(room, symbol)
        logger.info("%s disconnected from room %s", symbol, room.code)

    def _start_grace_timer(self, room: Room, symbol: str):
        room.cancel_timer(symbol)
        loop = asyncio.get_running_loop()
        handle = None

        def expire():
            self._on_grace_expired(room, handle)

        handle = loop.call_later(self.grace_period, expire)
        room.disconnect_timers[symbol] = handle

    def _on_grace_expired(self, room: Room, handle):
        symbol = room.timer_symbol(handle)
        if symbol is None:
            return
        room.disconnect_timers[symbol] = None
        if self.room_manager.get_room(room.code) is not room:
            return
        if room.players[symbol] is not None:
            return

        for other in SYMBOLS:
            player = room.players[other]
            if player is not None:
                self.manager.send_personal(player, WSRoomClosed(reason=ROOM_CLOSED_REASON))
                self.manager.unbind(player)
        self.room_manager.remove_room(room.code)
        logger.info("Room %s closed, %s did not reconnect", room.code, symbol)

    def _release(self, connection):
        """Give up the seat a connection holds before it takes another."""
        if self.manager.get_room(connection) is not None:
            self.handle_disconnect(connection)
        else:
            self.manager.unbind(connection)

    def send_error(self, connection, message: str):
        """Send an error message."""
        self.manager.send_personal(connection, WSError(message=message))
