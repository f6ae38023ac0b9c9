"""Auth endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from timeless.auth.jwt import REFRESH, create_token_pair, decode_token_of_use
from timeless.core.config import get_config
from timeless.core.dependencies import get_user_service
from timeless.core.exceptions import AuthenticationError, NotFoundError
from timeless.schemas.auth import LoginRequest, RefreshRequest, SignupRequest, TokenResponse, UserResponse
from timeless.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user_id: str, role: str) -> TokenResponse:
    cfg = get_config()
    tokens = create_token_pair(
        user_id=user_id,
        role=role,
        secret=cfg.JWT_SECRET,
        access_ttl_minutes=cfg.JWT_ACCESS_TTL_MINUTES,
        refresh_ttl_days=cfg.JWT_REFRESH_TTL_DAYS,
    )
    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, users: UserService = Depends(get_user_service)) -> UserResponse:
    user = users.register(
        email=payload.email,
        full_name=payload.full_name,
        password=payload.password,
        role=payload.role,
    )
    return UserResponse(id=user.id, email=user.email, full_name=user.full_name, role=user.role)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, users: UserService = Depends(get_user_service)) -> TokenResponse:
    try:
        user = users.authenticate(payload.email, payload.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return _issue_tokens(user.id, user.role.value)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshRequest, users: UserService = Depends(get_user_service)) -> TokenResponse:
    cfg = get_config()
    try:
        claims = decode_token_of_use(payload.refresh_token, secret=cfg.JWT_SECRET, token_use=REFRESH)
        user = users.get_user(str(claims["sub"]))
    except (AuthenticationError, NotFoundError, KeyError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token.") from exc
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User is inactive.")
    return _issue_tokens(user.id, user.role.value)
