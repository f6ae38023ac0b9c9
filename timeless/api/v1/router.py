"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from timeless.api.v1 import auth, chat, deals, health, ws
from timeless.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(deals.router)
api_router.include_router(chat.router)
api_router.include_router(ws.router)


def get_api_router() -> APIRouter:
    return api_router
