"""Authentication and user account API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from chirpy.api.contracts import (
    ApiErrorResponse,
    LoginResponse,
    TokenResponse,
    UserResponse,
)
from chirpy.auth.dependencies import (
    RefreshCredential,
    create_access_dependency,
    create_refresh_dependency,
)
from chirpy.auth.models import CredentialsRequest
from chirpy.auth.service import AuthService

_UNAUTHORIZED = {401: {"model": ApiErrorResponse}}


def create_auth_router(service: AuthService) -> APIRouter:
    """Build router with user, login, refresh and revoke endpoints."""
    router = APIRouter(tags=["auth"])
    require_user_id = create_access_dependency(service)
    require_refresh_token = create_refresh_dependency()

    @router.post(
        "/api/users",
        status_code=201,
        response_model=UserResponse,
        responses={409: {"model": ApiErrorResponse}},
    )
    def create_user(req: CredentialsRequest) -> UserResponse:
        """Register a new user."""
        user = service.register(req.email, req.password)
        return UserResponse.from_user(user)

    @router.put(
        "/api/users",
        response_model=UserResponse,
        responses={
            **_UNAUTHORIZED,
            404: {"model": ApiErrorResponse},
            409: {"model": ApiErrorResponse},
        },
    )
    def update_user(
        req: CredentialsRequest, user_id: int = Depends(require_user_id)
    ) -> UserResponse:
        """Change the caller's email and password."""
        user = service.update_credentials(user_id, req.email, req.password)
        return UserResponse.from_user(user)

    @router.post("/api/login", response_model=LoginResponse, responses=_UNAUTHORIZED)
    def login(req: CredentialsRequest) -> LoginResponse:
        """Authenticate user and return token pair."""
        session = service.login(req.email, req.password)
        return LoginResponse(
            id=session.user.id,
            email=session.user.email,
            is_chirpy_red=session.user.is_chirpy_red,
            token=session.access_token,
            refresh_token=session.refresh_token,
        )

    @router.post("/api/refresh", response_model=TokenResponse, responses=_UNAUTHORIZED)
    def refresh(
        credential: RefreshCredential = Depends(require_refresh_token),
    ) -> TokenResponse:
        """Issue a new access token for a refresh token."""
        return TokenResponse(token=service.refresh(credential.token))

    @router.post("/api/revoke", status_code=204, responses=_UNAUTHORIZED)
    def revoke(credential: RefreshCredential = Depends(require_refresh_token)) -> None:
        """Revoke the presented refresh token."""
        service.revoke(credential.token)

    return router
