"""Pydantic schema package for API contracts."""

from timeless.schemas.auth import LoginRequest, RefreshRequest, SignupRequest, TokenResponse, UserResponse
from timeless.schemas.chat import ChatAuthor, ChatMessageRequest, ChatMessageResponse
from timeless.schemas.common import ErrorEnvelope
from timeless.schemas.deals import (
    DealCreateRequest,
    DealHistoryResponse,
    DealSnapshot,
    DealStateUpdateRequest,
    DealTransitionsResponse,
    TrackRef,
)

__all__ = [
    "ChatAuthor",
    "ChatMessageRequest",
    "ChatMessageResponse",
    "DealCreateRequest",
    "DealHistoryResponse",
    "DealSnapshot",
    "DealStateUpdateRequest",
    "DealTransitionsResponse",
    "ErrorEnvelope",
    "LoginRequest",
    "RefreshRequest",
    "SignupRequest",
    "TokenResponse",
    "TrackRef",
    "UserResponse",
]
