"""WebSocket fan-out of deal updates to the artist and exec of each deal."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from concurrent.futures import Future
from typing import Any

from fastapi import WebSocket

from timeless.schemas.deals import DealSnapshot

logger = logging.getLogger(__name__)


class WebSocketNotifier:
    """Tracks open sockets per user and pushes ``dealUpdate`` frames.

    ``publish`` is called from request worker threads; delivery is scheduled on
    the server event loop captured by ``init`` and never awaited by the caller.
    """

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    async def init(self) -> None:
        self._loop = asyncio.get_running_loop()
        logger.info("notifier.websocket.ready", extra={"event": "notifier.websocket.ready"})

    async def teardown(self) -> None:
        with self._lock:
            sockets = [ws for group in self._connections.values() for ws in group]
            self._connections.clear()
        for websocket in sockets:
            try:
                await websocket.close()
            except Exception:
                logger.debug("notifier.websocket.close_failed", exc_info=True)
        self._loop = None
        logger.info("notifier.websocket.stopped", extra={"event": "notifier.websocket.stopped"})

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        with self._lock:
            self._connections[user_id].add(websocket)
        await websocket.send_json({"type": "connected"})

    def disconnect(self, user_id: str, websocket: WebSocket) -> None:
        with self._lock:
            group = self._connections.get(user_id)
            if group is None:
                return
            group.discard(websocket)
            if not group:
                del self._connections[user_id]

    def connection_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._connections.get(user_id, ()))

    def publish(self, deal: DealSnapshot) -> Future | None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("notifier.websocket.not_running deal=%s", deal.id)
            return None
        message = {"type": "dealUpdate", "deal": deal.model_dump(mode="json")}
        recipients = {deal.artist_id, deal.exec_id}
        future = asyncio.run_coroutine_threadsafe(self._broadcast(recipients, message), loop)
        future.add_done_callback(self._log_failure)
        return future

    async def _broadcast(self, recipients: set[str], message: dict[str, Any]) -> int:
        with self._lock:
            targets = [(user_id, ws) for user_id in recipients for ws in self._connections.get(user_id, ())]

        delivered = 0
        for user_id, websocket in targets:
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception:
                logger.warning(
                    "deal.broadcast.send_failed",
                    extra={"event": "deal.broadcast.send_failed", "context": {"user_id": user_id}},
                    exc_info=True,
                )
                self.disconnect(user_id, websocket)
        return delivered

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("deal.broadcast.failed", extra={"event": "deal.broadcast.failed"}, exc_info=exc)
