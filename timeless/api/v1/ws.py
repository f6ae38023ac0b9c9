"""WebSocket subscription endpoint for live deal updates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from timeless.core.dependencies import get_current_user
from timeless.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def deal_updates(websocket: WebSocket, token: str | None = Query(default=None)) -> None:
    notifier = getattr(websocket.app.state, "notifier", None)
    if token is None or not hasattr(notifier, "connect"):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        user = get_current_user(token=token)
    except AuthenticationError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await notifier.connect(user.user_id, websocket)
    logger.info("ws.connected", extra={"event": "ws.connected", "context": {"user_id": user.user_id}})
    try:
        while True:
            # Clients only listen; inbound frames are read to detect disconnects.
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("ws.disconnected", extra={"event": "ws.disconnected", "context": {"user_id": user.user_id}})
    finally:
        notifier.disconnect(user.user_id, websocket)
