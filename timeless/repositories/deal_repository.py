"""Record store for deals, their history and their chat feed."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.exc import StaleDataError

from timeless.core.exceptions import InvalidStateTransitionError
from timeless.models import ChatMessage, Deal, DealHistory, DealState, Track
from timeless.models.base import utcnow
from timeless.negotiation.terms import DealTerms

logger = logging.getLogger(__name__)


class DealRepository:
    """SQLAlchemy-backed store. Callers own the transaction boundary."""

    def __init__(self, session: Session):
        self.session = session

    def find(self, deal_id: str) -> Deal | None:
        """Load a deal straight from the database, refreshing any cached copy."""
        stmt = (
            select(Deal)
            .options(joinedload(Deal.track))
            .where(Deal.id == deal_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def find_track(self, track_id: str) -> Track | None:
        return self.session.get(Track, track_id)

    def create(self, deal: Deal) -> Deal:
        self.session.add(deal)
        self.session.flush()
        return deal

    def update(self, deal: Deal, state: DealState, terms: DealTerms, updated_at: datetime) -> Deal:
        """Apply a state mutation guarded by the row version loaded with ``deal``.

        Raises ``InvalidStateTransitionError`` when another writer changed the
        row first; the caller must roll back. ``deal`` is unusable until then.
        """
        deal_id, loaded_version = deal.id, deal.version
        deal.state = state
        deal.terms = terms
        deal.updated_at = updated_at
        try:
            self.session.flush()
        except StaleDataError as exc:
            logger.warning(
                "deal.update.stale_version",
                extra={
                    "event": "deal.update.stale_version",
                    "context": {"deal_id": deal_id, "loaded_version": loaded_version},
                },
            )
            raise InvalidStateTransitionError() from exc
        return deal

    def touch(self, deal_id: str) -> None:
        """Refresh ``updated_at`` without bumping the negotiation version."""
        self.session.execute(
            update(Deal)
            .where(Deal.id == deal_id)
            .values(updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

    def append_history(self, entry: DealHistory) -> DealHistory:
        self.session.add(entry)
        return entry

    def list_history(self, deal_id: str) -> list[DealHistory]:
        stmt = select(DealHistory).where(DealHistory.deal_id == deal_id).order_by(DealHistory.id.asc())
        return list(self.session.execute(stmt).scalars().all())

    def list_for_user(self, user_id: str) -> list[Deal]:
        stmt = (
            select(Deal)
            .options(joinedload(Deal.track))
            .where(or_(Deal.artist_id == user_id, Deal.exec_id == user_id))
            .order_by(Deal.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_all(self) -> list[Deal]:
        stmt = (
            select(Deal)
            .options(joinedload(Deal.track))
            .order_by(Deal.updated_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars().all())

    def add_message(self, message: ChatMessage) -> ChatMessage:
        self.session.add(message)
        self.session.flush()
        return message

    def list_messages(self, deal_id: str) -> list[ChatMessage]:
        stmt = (
            select(ChatMessage)
            .options(joinedload(ChatMessage.user))
            .where(ChatMessage.deal_id == deal_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())
