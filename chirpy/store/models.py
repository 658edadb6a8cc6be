"""Pydantic models for the persisted document."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class User(BaseModel):
    """Persisted user."""

    id: int
    email: str
    password_hash: str
    is_chirpy_red: bool = False


class Chirp(BaseModel):
    """Persisted chirp."""

    id: int
    author_id: int
    body: str


class RefreshTokenRecord(BaseModel):
    """Revocation state for one issued refresh token."""

    revoked: bool = False
    revoked_at: datetime | None = None


class Document(BaseModel):
    """Whole store contents, read and written as one unit."""

    chirps: dict[int, Chirp] = Field(default_factory=dict)
    users: dict[int, User] = Field(default_factory=dict)
    tokens: dict[str, RefreshTokenRecord] = Field(default_factory=dict)
    next_chirp_id: int = 0
    next_user_id: int = 0

    @model_validator(mode="after")
    def advance_counters(self) -> "Document":
        # Files written before counters existed only carry the maps.
        self.next_chirp_id = max(self.next_chirp_id, max(self.chirps, default=0) + 1)
        self.next_user_id = max(self.next_user_id, max(self.users, default=0) + 1)
        return self
