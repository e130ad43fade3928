"""
Web interface module for the tic-tac-toe room server.

Provides a FastAPI-based server for:
- Creating and joining rooms by code
- Playing moves over a WebSocket
- Reconnecting within a grace window
"""
