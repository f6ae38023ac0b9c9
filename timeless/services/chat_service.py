"""Append-only chat feed attached to each deal."""

from __future__ import annotations

from sqlalchemy.orm import Session

from timeless.core.config import get_config
from timeless.core.exceptions import ChatClosedError, NotFoundError, UnauthorizedActionError, ValidationError
from timeless.models import ChatMessage, Deal, UserRole
from timeless.negotiation.transitions import is_terminal
from timeless.repositories.deal_repository import DealRepository
from timeless.services.base_service import BaseService
from timeless.services.deal_service import coerce_role


class ChatService(BaseService):
    """Parties read and post messages; posting stops once the deal is closed."""

    def __init__(self, db: Session | None = None, repository: DealRepository | None = None) -> None:
        super().__init__(db)
        self.repository = repository or DealRepository(self.db)
        self.max_length = get_config().CHAT_MAX_MESSAGE_LENGTH

    def _load_for(self, deal_id: str, user_id: str, role: UserRole | str | None = None) -> Deal:
        deal = self.repository.find(deal_id)
        if deal is None:
            raise NotFoundError(f"Deal not found: {deal_id}")
        if deal.is_party(user_id):
            return deal
        if role is not None and coerce_role(role) == UserRole.ADMIN:
            return deal
        raise UnauthorizedActionError("Not authorized to access messages in this deal.")

    def list_messages(self, deal_id: str, user_id: str, role: UserRole | str | None = None) -> list[ChatMessage]:
        self._load_for(deal_id, user_id, role)
        return self.repository.list_messages(deal_id)

    def send_message(self, deal_id: str, user_id: str, content: str) -> ChatMessage:
        deal = self._load_for(deal_id, user_id)
        if is_terminal(deal.state):
            raise ChatClosedError(f"Deal is {deal.state.value}; the conversation is read-only.")

        text = content.strip()
        if not text:
            raise ValidationError("Message content must not be empty.")
        if len(text) > self.max_length:
            raise ValidationError(f"Message content exceeds {self.max_length} characters.")

        message = ChatMessage(deal_id=deal.id, user_id=user_id, content=text)
        with self.write("chat.send", deal_id=deal.id, user_id=user_id):
            self.repository.add_message(message)
            # Keeps the conversation at the top of "most recently updated" listings.
            self.repository.touch(deal.id)
        self.db.refresh(message)
        return message
