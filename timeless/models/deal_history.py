"""Deal history model module."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeless.core.enums import DealAction, DealState, UserRole
from timeless.models.base import Base, utcnow


class DealHistory(Base):
    """Append-only audit row written for every accepted state transition."""

    __tablename__ = "deal_history"
    __table_args__ = (Index("idx_deal_history_deal", "deal_id", "id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deal_id: Mapped[str] = mapped_column(ForeignKey("deals.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False)
    action: Mapped[DealAction] = mapped_column(Enum(DealAction), nullable=False)
    previous_state: Mapped[DealState] = mapped_column(Enum(DealState), nullable=False)
    new_state: Mapped[DealState] = mapped_column(Enum(DealState), nullable=False)
    changes: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    deal = relationship("Deal", back_populates="history")
