"""Store failures, kept apart from transport concerns."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for document store failures."""


class NotFoundError(StoreError):
    """Requested user or chirp does not exist."""

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class DuplicateEmailError(StoreError):
    """Another user already owns the email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"Email already in use: {email}")
        self.email = email


class StoreIOError(StoreError):
    """Backing file could not be read or written."""


class StoreDecodeError(StoreIOError):
    """Backing file does not hold a valid document."""
