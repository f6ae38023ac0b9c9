"""Bearer-token checks shared by the deal, chat and admin routes.

Each route names the scopes it needs (``deals.negotiate``, ``chat.send``...);
whether the caller is actually a party to a given deal is decided later by
the services, not here.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException

from timeless.auth.rbac import require_scopes
from timeless.core.config import get_config
from timeless.core.dependencies import CurrentUser, get_current_user
from timeless.core.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)


def _extract_bearer_token(authorization: str | None) -> str:
    if authorization is None or not authorization.strip():
        raise AuthenticationError("Authorization header is required.")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must use Bearer token.")
    return token.strip()


def authorize(authorization: str | None, scopes: list[str]) -> CurrentUser:
    token = _extract_bearer_token(authorization)
    user = get_current_user(token=token, settings=get_config())
    require_scopes(user.role, scopes)
    return user


def authorize_or_raise(authorization: str | None, scopes: list[str]) -> CurrentUser:
    """Return the caller, or raise 401 (no valid token) / 403 (role lacks a scope)."""
    try:
        return authorize(authorization=authorization, scopes=scopes)
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc
    except AuthorizationError as exc:
        logger.info(
            "api.scope_denied",
            extra={"event": "api.scope_denied", "context": {"scopes": scopes, "reason": str(exc)}},
        )
        raise HTTPException(status_code=403, detail=str(exc)) from exc
