"""Deal request/response schemas for API contracts and broadcast payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from timeless.core.enums import DealAction, DealState, UserRole
from timeless.models import Deal, DealHistory
from timeless.negotiation.terms import DealTerms, TermsChanges


class TrackRef(BaseModel):
    id: str
    title: str


class DealSnapshot(BaseModel):
    """Materialized view of a deal, returned to callers and pushed to viewers."""

    model_config = ConfigDict(frozen=True)

    id: str
    track_id: str
    track: TrackRef | None = None
    artist_id: str
    exec_id: str
    state: DealState
    terms: DealTerms
    created_by_id: str
    created_by_role: UserRole
    created_at: datetime
    updated_at: datetime
    version: int

    @classmethod
    def from_record(cls, deal: Deal) -> "DealSnapshot":
        track = TrackRef(id=deal.track.id, title=deal.track.title) if deal.track is not None else None
        return cls(
            id=deal.id,
            track_id=deal.track_id,
            track=track,
            artist_id=deal.artist_id,
            exec_id=deal.exec_id,
            state=deal.state,
            terms=deal.terms,
            created_by_id=deal.created_by_id,
            created_by_role=deal.created_by_role,
            created_at=deal.created_at,
            updated_at=deal.updated_at,
            version=deal.version,
        )


class DealHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deal_id: str
    user_id: str
    user_role: UserRole
    action: DealAction
    previous_state: DealState
    new_state: DealState
    changes: dict[str, Any]
    timestamp: datetime

    @classmethod
    def from_record(cls, entry: DealHistory) -> "DealHistoryResponse":
        return cls.model_validate(entry)


class DealCreateRequest(BaseModel):
    track_id: str = Field(min_length=1, max_length=36)
    terms: DealTerms


class DealStateUpdateRequest(BaseModel):
    new_state: DealState
    changes: TermsChanges = Field(default_factory=TermsChanges)
    expected_version: int = Field(
        ge=1,
        description="Version of the snapshot the party acted on; a mismatch is rejected as a stale action.",
    )


class DealTransitionsResponse(BaseModel):
    deal_id: str
    state: DealState
    available: list[DealState]
