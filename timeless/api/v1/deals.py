"""Deal negotiation endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, status

from timeless.api.v1._authz import authorize_or_raise
from timeless.core.dependencies import get_deal_service
from timeless.schemas.deals import (
    DealCreateRequest,
    DealHistoryResponse,
    DealSnapshot,
    DealStateUpdateRequest,
    DealTransitionsResponse,
)
from timeless.services.deal_service import DealService

router = APIRouter(tags=["deals"])


@router.get("/deals", response_model=list[DealSnapshot])
def list_deals(
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> list[DealSnapshot]:
    user = authorize_or_raise(authorization, scopes=["deals.read"])
    return deals.list_deals_for_user(user.user_id)


@router.post("/deals", response_model=DealSnapshot, status_code=status.HTTP_201_CREATED)
def create_deal(
    payload: DealCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> DealSnapshot:
    user = authorize_or_raise(authorization, scopes=["deals.create"])
    return deals.create_deal(track_id=payload.track_id, user_id=user.user_id, role=user.role, terms=payload.terms)


@router.get("/deals/{deal_id}", response_model=DealSnapshot)
def get_deal(
    deal_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> DealSnapshot:
    user = authorize_or_raise(authorization, scopes=["deals.read"])
    return deals.get_deal_for_user(deal_id, user.user_id, user.role)


@router.post("/deals/{deal_id}/state", response_model=DealSnapshot)
def update_deal_state(
    deal_id: str,
    payload: DealStateUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> DealSnapshot:
    user = authorize_or_raise(authorization, scopes=["deals.negotiate"])
    return deals.update_deal_state(
        deal_id=deal_id,
        user_id=user.user_id,
        user_role=user.role,
        new_state=payload.new_state,
        changes=payload.changes,
        expected_version=payload.expected_version,
    )


@router.get("/deals/{deal_id}/history", response_model=list[DealHistoryResponse])
def get_deal_history(
    deal_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> list[DealHistoryResponse]:
    user = authorize_or_raise(authorization, scopes=["deals.read"])
    return deals.get_history(deal_id, user.user_id, user.role)


@router.get("/deals/{deal_id}/transitions", response_model=DealTransitionsResponse)
def get_deal_transitions(
    deal_id: str,
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> DealTransitionsResponse:
    user = authorize_or_raise(authorization, scopes=["deals.read"])
    available = deals.available_transitions(deal_id, user.user_id, user.role)
    snapshot = deals.get_deal(deal_id)
    return DealTransitionsResponse(deal_id=deal_id, state=snapshot.state, available=available)


@router.get("/admin/deals", response_model=list[DealSnapshot], tags=["admin"])
def admin_list_deals(
    authorization: str | None = Header(default=None, alias="Authorization"),
    deals: DealService = Depends(get_deal_service),
) -> list[DealSnapshot]:
    authorize_or_raise(authorization, scopes=["deals.admin"])
    return deals.list_all_deals()
