# src/pulsar/api/v1/endpoints/auth.py
"""Authentication endpoints for the Pulsar API."""

from __future__ import annotations

from fastapi import APIRouter, status

from pulsar.api.v1.dependencies import CurrentUserDep, SessionDep
from pulsar.core.security import create_access_token
from pulsar.schemas.user import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from pulsar.services import user_service
from pulsar.services.projection import public_user

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
async def register_user(payload: RegisterRequest, db: SessionDep) -> AuthResponse:
    """Create an account and return a token for it."""
    user = user_service.create_user(db, payload)
    return AuthResponse(
        message="Registration successful",
        token=create_access_token(user.id),
        user=public_user(user),
    )


@router.post(
    "/login",
    summary="Authenticate with email or username",
    response_model=AuthResponse,
)
async def login_user(payload: LoginRequest, db: SessionDep) -> AuthResponse:
    """Exchange valid credentials for an access token."""
    user = user_service.authenticate(db, payload.email_or_username, payload.password)
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id),
        user=public_user(user),
    )


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: CurrentUserDep) -> MeResponse:
    """Return the caller's own account."""
    return MeResponse(user=public_user(current_user))
