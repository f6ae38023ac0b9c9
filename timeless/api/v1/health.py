"""Liveness plus the two dependencies a negotiation needs: the database and push delivery."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timeless.core.config import get_config
from timeless.core.dependencies import get_db_session, get_notifier
from timeless.realtime.notifier import Notifier
from timeless.realtime.websocket import WebSocketNotifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db_session), notifier: Notifier = Depends(get_notifier)) -> dict:
    cfg = get_config()
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        logger.warning("health.database_unreachable", extra={"event": "health.database_unreachable"}, exc_info=exc)
        database = "unreachable"
    return {
        "status": "ok" if database == "ok" else "degraded",
        "service": cfg.APP_NAME,
        "version": cfg.APP_VERSION,
        "database": database,
        "notifier": "websocket" if isinstance(notifier, WebSocketNotifier) else "none",
    }
