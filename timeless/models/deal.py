"""Deal model module."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeless.core.enums import DealState, RightsType, UsageType, UserRole
from timeless.models.base import AuditMixin, Base
from timeless.negotiation.terms import DealTerms
from timeless.utils.ids import new_id


class Deal(Base, AuditMixin):
    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_artist_updated", "artist_id", "updated_at"),
        Index("idx_deals_exec_updated", "exec_id", "updated_at"),
        Index("idx_deals_track", "track_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    track_id: Mapped[str] = mapped_column(ForeignKey("tracks.id", ondelete="RESTRICT"), nullable=False)
    artist_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    exec_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    state: Mapped[DealState] = mapped_column(Enum(DealState), default=DealState.PENDING, nullable=False)

    usage_type: Mapped[UsageType] = mapped_column(Enum(UsageType), nullable=False)
    rights: Mapped[RightsType] = mapped_column(Enum(RightsType), nullable=False)
    duration_months: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    created_by_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_by_role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False)

    # Bumped on every flush of this row; UPDATEs carry "WHERE version = <loaded>".
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    track = relationship("Track")
    history = relationship(
        "DealHistory",
        back_populates="deal",
        order_by="DealHistory.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    messages = relationship(
        "ChatMessage",
        back_populates="deal",
        order_by="ChatMessage.created_at",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def terms(self) -> DealTerms:
        return DealTerms(
            usage_type=self.usage_type,
            rights=self.rights,
            duration=self.duration_months,
            price=self.price,
        )

    @terms.setter
    def terms(self, value: DealTerms) -> None:
        self.usage_type = value.usage_type
        self.rights = value.rights
        self.duration_months = value.duration
        self.price = value.price

    def is_party(self, user_id: str) -> bool:
        return user_id in (self.artist_id, self.exec_id)
