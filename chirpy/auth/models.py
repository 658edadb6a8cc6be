"""Pydantic models for authentication domain."""

from __future__ import annotations

from pydantic import BaseModel, Field

from chirpy.store.models import User


class CredentialsRequest(BaseModel):
    """Email and password payload used by registration, update and login."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class AuthSession(BaseModel):
    """Issued token pair together with the authenticated user."""

    user: User
    access_token: str
    refresh_token: str
