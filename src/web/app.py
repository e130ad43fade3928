"""
FastAPI application for the tic-tac-toe room server.
"""
import asyncio
import logging
import os
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from src.web.config import Settings
from src.web.models import HealthResponse
from src.web.room_manager import RoomManager
from src.web.websocket import ConnectionManager, GameWebSocketHandler

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, rng: Optional[random.Random] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Server settings (defaults read from the environment)
        rng: Random source for room codes and seat assignment
    """
    settings = settings or Settings()
    room_manager = RoomManager(rng=rng, ttl=settings.room_ttl_sec)
    connection_manager = ConnectionManager(room_manager)
    ws_handler = GameWebSocketHandler(connection_manager, grace_period=settings.disconnect_grace_sec)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = asyncio.create_task(room_manager.run_sweeper(settings.sweep_interval_sec))
        logger.info("Sweeping rooms idle for %ss every %ss", settings.room_ttl_sec, settings.sweep_interval_sec)
        try:
            yield
        finally:
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass

    app = FastAPI(
        title="Tic-Tac-Toe Rooms",
        description="Two-player tic-tac-toe over WebSockets",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.room_manager = room_manager
    app.state.connection_manager = connection_manager
    app.state.ws_handler = ws_handler

    # =========================================================================
    # REST API Endpoints
    # =========================================================================

    @app.get("/api/health", response_model=HealthResponse)
    async def health():
        """Liveness check with the number of open rooms."""
        return HealthResponse(rooms=len(room_manager.rooms))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """WebSocket endpoint for the room protocol."""
        connection = await connection_manager.connect(websocket)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes")
                if raw is not None:
                    ws_handler.handle_message(connection, raw)
        finally:
            ws_handler.handle_disconnect(connection)
            await connection_manager.disconnect(connection)

    # =========================================================================
    # Static Files (Frontend)
    # =========================================================================

    @app.get("/")
    async def serve_index():
        """Serve the main page."""
        index_path = os.path.join(settings.static_dir, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"message": "Tic-tac-toe room server. Connect to /ws to play."}

    if os.path.isdir(settings.static_dir):
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    return app


app = create_app()
