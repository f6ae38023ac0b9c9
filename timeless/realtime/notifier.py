"""Notifier capability used by the deal service to push updated snapshots."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from timeless.schemas.deals import DealSnapshot

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Best-effort delivery of deal snapshots to the deal's connected parties."""

    async def init(self) -> None: ...

    async def teardown(self) -> None: ...

    def publish(self, deal: "DealSnapshot") -> Any: ...


class NullNotifier:
    """Notifier that drops every update; used when push delivery is disabled."""

    async def init(self) -> None:
        logger.info("notifier.null.ready", extra={"event": "notifier.null.ready"})

    async def teardown(self) -> None:
        return None

    def publish(self, deal: "DealSnapshot") -> None:
        logger.debug("notifier.null.dropped deal=%s", deal.id)


def build_notifier(backend: str) -> Notifier:
    """Create the notifier selected by ``NOTIFIER_BACKEND``."""
    if backend == "websocket":
        from timeless.realtime.websocket import WebSocketNotifier

        return WebSocketNotifier()
    return NullNotifier()
