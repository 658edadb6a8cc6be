"""Pydantic API response models used in OpenAPI contracts."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from chirpy.store.models import Chirp, User


class ApiErrorResponse(BaseModel):
    """Stable error envelope for API responses."""

    error_code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Health check response payload."""

    status: Literal["ok"]


class UserResponse(BaseModel):
    """Public view of a user, without the password hash."""

    id: int
    email: str
    is_chirpy_red: bool

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, is_chirpy_red=user.is_chirpy_red)


class LoginResponse(UserResponse):
    """Login response payload with token pair."""

    token: str
    refresh_token: str


class TokenResponse(BaseModel):
    """Freshly minted access token."""

    token: str


class ChirpResponse(BaseModel):
    """Chirp payload."""

    id: int
    author_id: int
    body: str

    @classmethod
    def from_chirp(cls, chirp: Chirp) -> "ChirpResponse":
        return cls(id=chirp.id, author_id=chirp.author_id, body=chirp.body)
