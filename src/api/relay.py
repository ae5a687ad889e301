"""
Move relay between remote players.

Stateless pass-through: a payload sent by one client is delivered, unmodified and unvalidated,
to every OTHER connected client. Never echoed back to its sender.
"""

import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info("Player connected (%d connected)", len(self.active_connections))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info("Player disconnected (%d connected)", len(self.active_connections))

    async def relay(self, sender: WebSocket, payload: str) -> None:
        """
        Broadcast to everybody except the sender.

        A peer that cannot be reached is dropped; the others still get the payload.
        """
        dead: list[WebSocket] = []
        for connection in list(self.active_connections):
            if connection is sender:
                continue
            try:
                await connection.send_text(payload)
            except Exception:
                logger.warning("Dropping unreachable player connection", exc_info=True)
                dead.append(connection)
        for connection in dead:
            self.disconnect(connection)
