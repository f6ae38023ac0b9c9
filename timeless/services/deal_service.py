"""Deal negotiation service: the only place a deal's state is mutated."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from timeless.core.exceptions import (
    InvalidStateTransitionError,
    NotFoundError,
    UnauthorizedActionError,
    ValidationError,
)
from timeless.core.logging import LogContext, log_extra
from timeless.models import Deal, DealHistory, DealState, UserRole
from timeless.models.base import utcnow
from timeless.negotiation.terms import DealTerms, TermsChanges, merge_terms
from timeless.negotiation.transitions import action_for, allowed_targets, authorize_transition
from timeless.realtime.notifier import Notifier, NullNotifier
from timeless.repositories.deal_repository import DealRepository
from timeless.schemas.deals import DealHistoryResponse, DealSnapshot
from timeless.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEAL_CREATOR_ROLES = frozenset({UserRole.EXEC, UserRole.REP})


def coerce_role(role: UserRole | str) -> UserRole:
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(str(role).upper())
    except ValueError as exc:
        raise UnauthorizedActionError(f"Unknown role: {role}") from exc


def _coerce_state(state: DealState | str) -> DealState:
    if isinstance(state, DealState):
        return state
    try:
        return DealState(str(state).upper())
    except ValueError as exc:
        raise InvalidStateTransitionError(f"Unknown deal state: {state}") from exc


class DealService(BaseService):
    """Service for deal reads, creation and negotiated state transitions."""

    def __init__(
        self,
        db: Session | None = None,
        notifier: Notifier | None = None,
        repository: DealRepository | None = None,
    ) -> None:
        super().__init__(db)
        self.repository = repository or DealRepository(self.db)
        self.notifier = notifier or NullNotifier()

    def _load(self, deal_id: str) -> Deal:
        deal = self.repository.find(deal_id)
        if deal is None:
            raise NotFoundError(f"Deal not found: {deal_id}")
        return deal

    def _ensure_can_view(self, deal: Deal, user_id: str, role: UserRole | str) -> None:
        if coerce_role(role) == UserRole.ADMIN or deal.is_party(user_id):
            return
        raise UnauthorizedActionError("Not a party to this deal.")

    def get_deal(self, deal_id: str) -> DealSnapshot:
        return DealSnapshot.from_record(self._load(deal_id))

    def get_deal_for_user(self, deal_id: str, user_id: str, role: UserRole | str) -> DealSnapshot:
        deal = self._load(deal_id)
        self._ensure_can_view(deal, user_id, role)
        return DealSnapshot.from_record(deal)

    def list_deals_for_user(self, user_id: str) -> list[DealSnapshot]:
        return [DealSnapshot.from_record(deal) for deal in self.repository.list_for_user(user_id)]

    def list_all_deals(self) -> list[DealSnapshot]:
        return [DealSnapshot.from_record(deal) for deal in self.repository.list_all()]

    def get_history(self, deal_id: str, user_id: str, role: UserRole | str) -> list[DealHistoryResponse]:
        deal = self._load(deal_id)
        self._ensure_can_view(deal, user_id, role)
        return [DealHistoryResponse.from_record(entry) for entry in self.repository.list_history(deal_id)]

    def available_transitions(self, deal_id: str, user_id: str, role: UserRole | str) -> list[DealState]:
        """Target states the caller could request right now; empty for non-parties."""
        deal = self._load(deal_id)
        self._ensure_can_view(deal, user_id, role)
        if not deal.is_party(user_id):
            return []
        return allowed_targets(deal.state, coerce_role(role))

    def create_deal(self, track_id: str, user_id: str, role: UserRole | str, terms: DealTerms) -> DealSnapshot:
        """Open a deal on ``track_id`` between its artist and the calling exec."""
        acting_role = coerce_role(role)
        if acting_role not in DEAL_CREATOR_ROLES:
            raise UnauthorizedActionError("Only executives and representatives can open deals.")

        track = self.repository.find_track(track_id)
        if track is None:
            raise NotFoundError(f"Track not found: {track_id}")
        if track.artist_id == user_id:
            raise ValidationError("Cannot open a deal on your own track.")

        now = utcnow()
        deal = Deal(
            track_id=track.id,
            artist_id=track.artist_id,
            exec_id=user_id,
            state=DealState.PENDING,
            created_by_id=user_id,
            created_by_role=acting_role,
            created_at=now,
            updated_at=now,
        )
        deal.terms = terms
        with self.write("deal.create", user_id=user_id, track_id=track.id):
            self.repository.create(deal)

        snapshot = self.get_deal(deal.id)
        logger.info(
            "deal.created",
            extra=log_extra(
                "deal.created",
                LogContext(user_id=user_id, role=acting_role.value, deal_id=snapshot.id),
                track_id=track.id,
            ),
        )
        self._publish(snapshot)
        return snapshot

    def update_deal_state(
        self,
        deal_id: str,
        user_id: str,
        user_role: UserRole | str,
        new_state: DealState | str,
        changes: TermsChanges | None = None,
        expected_version: int | None = None,
    ) -> DealSnapshot:
        """Move a deal to ``new_state`` on behalf of one of its parties.

        Validation happens before any write. The history append and the deal
        update then commit together; losing a race against another writer
        rolls both back and surfaces as ``InvalidStateTransitionError``.
        """
        role = coerce_role(user_role)
        target = _coerce_state(new_state)
        context = LogContext(user_id=user_id, role=role.value, deal_id=deal_id)

        deal = self._load(deal_id)
        if not deal.is_party(user_id):
            raise UnauthorizedActionError("Not a party to this deal.")
        if expected_version is not None and expected_version != deal.version:
            raise InvalidStateTransitionError()

        previous_state = deal.state
        authorize_transition(previous_state, target, role)

        delta = changes or TermsChanges()
        merged_terms = merge_terms(deal.terms, delta)
        action = action_for(target)
        now = utcnow()

        entry = DealHistory(
            deal_id=deal.id,
            user_id=user_id,
            user_role=role,
            action=action,
            previous_state=previous_state,
            new_state=target,
            changes=delta.as_record(),
            timestamp=now,
        )
        with self.write(
            "deal.state",
            deal_id=deal_id,
            user_id=user_id,
            previous_state=previous_state.value,
            new_state=target.value,
        ):
            self.repository.append_history(entry)
            self.repository.update(deal, state=target, terms=merged_terms, updated_at=now)

        snapshot = self.get_deal(deal_id)
        logger.info(
            "deal.state.updated",
            extra=log_extra(
                "deal.state.updated",
                context,
                previous_state=previous_state.value,
                new_state=target.value,
                action=action.value,
                version=snapshot.version,
            ),
        )
        self._publish(snapshot)
        return snapshot

    def _publish(self, snapshot: DealSnapshot) -> None:
        try:
            self.notifier.publish(snapshot)
        except Exception:
            logger.warning(
                "deal.broadcast.failed",
                extra=log_extra("deal.broadcast.failed", LogContext(deal_id=snapshot.id)),
                exc_info=True,
            )
