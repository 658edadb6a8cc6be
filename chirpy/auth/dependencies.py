"""FastAPI dependencies that turn Authorization headers into caller identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from fastapi import Header

from chirpy.auth.headers import extract_api_key, extract_bearer, verify_api_key
from chirpy.auth.service import AuthService


@dataclass(frozen=True)
class RefreshCredential:
    """Raw refresh token presented by the caller."""

    token: str


def create_access_dependency(service: AuthService) -> Callable[..., int]:
    """Build dependency returning the user id of a valid access token."""

    def require_user_id(authorization: str | None = Header(default=None)) -> int:
        token = extract_bearer(authorization)
        return service.verify_access_token(token)

    return require_user_id


def create_refresh_dependency() -> Callable[..., RefreshCredential]:
    """Build dependency returning the bearer token of a refresh call.

    Verification is left to the service call so that refresh and revoke can
    apply different revocation rules.
    """

    def require_refresh_token(
        authorization: str | None = Header(default=None),
    ) -> RefreshCredential:
        return RefreshCredential(token=extract_bearer(authorization))

    return require_refresh_token


def create_api_key_dependency(expected_key: str) -> Callable[..., None]:
    """Build dependency that rejects calls without the shared API key."""

    def require_api_key(authorization: str | None = Header(default=None)) -> None:
        verify_api_key(extract_api_key(authorization), expected_key)

    return require_api_key
