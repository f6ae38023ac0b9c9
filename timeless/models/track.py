"""Track model module."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeless.models.base import AuditMixin, Base
from timeless.utils.ids import new_id


class Track(Base, AuditMixin):
    __tablename__ = "tracks"
    __table_args__ = (Index("idx_tracks_artist", "artist_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    artist = relationship("User", back_populates="tracks")
