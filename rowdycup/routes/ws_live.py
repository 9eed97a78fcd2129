from __future__ import annotations

import logging
from typing import Any, Dict, Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from fastapi import HTTPException

from rowdycup.metrics import LIVE_CONNECTIONS
from rowdycup.security import require_api_key
from rowdycup.tournament import events
from rowdycup.tournament.events import LiveEvent

router = APIRouter(tags=["live"])

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        LIVE_CONNECTIONS.set(len(self._connections))

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        LIVE_CONNECTIONS.set(len(self._connections))

    async def broadcast(self, message: Dict[str, object]) -> int:
        delivered = 0
        to_remove: Set[WebSocket] = set()

        for websocket in list(self._connections):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception:
                to_remove.add(websocket)

        for websocket in to_remove:
            logger.info("dropping live socket after failed send")
            self.disconnect(websocket)

        return delivered

    def __len__(self) -> int:  # pragma: no cover - convenience helper
        return len(self._connections)


manager = ConnectionManager()


async def broadcast_event(event: LiveEvent | str, data: Any) -> int:
    """Publish an event envelope in-process and push it to every live viewer."""

    message = events.publish(event, data)
    return await manager.broadcast(message)


def _authorize_websocket(websocket: WebSocket) -> bool:
    try:
        require_api_key(
            x_api_key=websocket.headers.get("x-api-key"),
            api_key_query=websocket.query_params.get("apiKey"),
        )
        return True
    except HTTPException:
        return False


@router.websocket("/ws")
async def live_ws(websocket: WebSocket) -> None:
    if not _authorize_websocket(websocket):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)


__all__ = ["ConnectionManager", "broadcast_event", "manager", "router"]
