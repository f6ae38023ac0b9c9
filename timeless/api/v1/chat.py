"""Deal chat endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status

from timeless.api.v1._authz import authorize_or_raise
from timeless.core.dependencies import get_chat_service
from timeless.schemas.chat import ChatMessageRequest, ChatMessageResponse
from timeless.services.chat_service import ChatService

router = APIRouter(tags=["chat"])


@router.get("/deals/{deal_id}/messages", response_model=list[ChatMessageResponse])
def list_messages(
    deal_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
    chat: ChatService = Depends(get_chat_service),
) -> list[ChatMessageResponse]:
    user = authorize_or_raise(authorization, scopes=["chat.read"])
    messages = chat.list_messages(deal_id, user.user_id, user.role)
    return [ChatMessageResponse.model_validate(message) for message in messages]


@router.post("/deals/{deal_id}/messages", response_model=ChatMessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    deal_id: str,
    payload: ChatMessageRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    chat: ChatService = Depends(get_chat_service),
) -> ChatMessageResponse:
    user = authorize_or_raise(authorization, scopes=["chat.send"])
    message = chat.send_message(deal_id, user.user_id, payload.content)
    return ChatMessageResponse.model_validate(message)
