"""SQLAlchemy model package for the Timeless schema."""

from timeless.models.base import Base
from timeless.models.chat_message import ChatMessage
from timeless.models.deal import Deal
from timeless.models.deal_history import DealHistory
from timeless.core.enums import DealAction, DealState, RightsType, UsageType, UserRole
from timeless.models.track import Track
from timeless.models.user import User

__all__ = [
    "Base",
    "ChatMessage",
    "Deal",
    "DealAction",
    "DealHistory",
    "DealState",
    "RightsType",
    "Track",
    "UsageType",
    "User",
    "UserRole",
]
