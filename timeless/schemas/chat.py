"""Chat schema module."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str


class ChatMessageRequest(BaseModel):
    content: str = Field(min_length=1)


class ChatMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: str
    user_id: str
    content: str
    created_at: datetime
    user: ChatAuthor | None = None
