"""Dependency providers for API handlers."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from timeless.auth.jwt import ACCESS, decode_token_of_use
from timeless.core.config import Config, get_config
from timeless.core.exceptions import AuthenticationError
from timeless.database.db import get_db
from timeless.realtime.notifier import Notifier, NullNotifier
from timeless.services.chat_service import ChatService
from timeless.services.deal_service import DealService
from timeless.services.user_service import UserService


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    role: str
    claims: dict[str, Any]


def get_settings() -> Config:
    """Return validated application configuration."""
    return get_config()


def get_db_session() -> Generator[Session, None, None]:
    """Yield SQLAlchemy session for dependency injection."""
    yield from get_db()


def get_current_user(token: str, settings: Config | None = None) -> CurrentUser:
    """Resolve the session context ``(user_id, role)`` from an access token."""
    cfg = settings or get_settings()
    claims = decode_token_of_use(token, secret=cfg.JWT_SECRET, token_use=ACCESS)
    try:
        return CurrentUser(user_id=str(claims["sub"]), role=str(claims["role"]).upper(), claims=claims)
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid auth claims.") from exc


def get_notifier(request: Request) -> Notifier:
    return getattr(request.app.state, "notifier", None) or NullNotifier()


def get_deal_service(
    db: Session = Depends(get_db_session),
    notifier: Notifier = Depends(get_notifier),
) -> DealService:
    return DealService(db=db, notifier=notifier)


def get_chat_service(db: Session = Depends(get_db_session)) -> ChatService:
    return ChatService(db=db)


def get_user_service(db: Session = Depends(get_db_session)) -> UserService:
    return UserService(db=db)
