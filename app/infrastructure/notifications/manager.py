"""Websocket pool for the notification stream, partitioned by registry scope."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

# Policy violation: the socket was opened for a session that is no longer active.
SESSION_ENDED_CLOSE_CODE = 1008


class NotificationConnectionManager:
    """Track the websockets listening to each registry scope.

    A socket belongs to the scope that was active when it connected. When the
    session switches user, :meth:`close_scope` ends the sockets of the old
    scope so they never receive another user's list.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[WebSocket]] = defaultdict(set)

    async def connect(self, scope: str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections[scope].add(websocket)
        logger.debug("Notification socket joined %s (%d open)", scope, self.connection_count(scope))

    def disconnect(self, scope: str, websocket: WebSocket) -> None:
        connections = self._connections.get(scope)
        if connections is None:
            return
        connections.discard(websocket)
        if not connections:
            self._connections.pop(scope, None)

    def connection_count(self, scope: str) -> int:
        return len(self._connections.get(scope, ()))

    async def send_to_scope(self, scope: str, message: dict[str, Any]) -> int:
        """Send ``message`` to the sockets of ``scope``; return how many received it."""

        delivered = 0
        for connection in list(self._connections.get(scope, ())):
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.info("Dropping notification socket of %s: %s", scope, exc)
                self.disconnect(scope, connection)
            else:
                delivered += 1
        return delivered

    async def close_scope(self, scope: str, *, reason: str = "Session changed") -> int:
        """Close and forget every socket of ``scope``; return how many were open."""

        connections = self._connections.pop(scope, set())
        for connection in connections:
            try:
                await connection.close(code=SESSION_ENDED_CLOSE_CODE, reason=reason)
            except Exception as exc:
                logger.debug("Notification socket of %s already closed: %s", scope, exc)
        if connections:
            logger.info("Closed %d notification socket(s) of %s", len(connections), scope)
        return len(connections)


__all__ = ["NotificationConnectionManager", "SESSION_ENDED_CLOSE_CODE"]
