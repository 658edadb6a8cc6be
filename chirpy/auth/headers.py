"""Credential extraction from the Authorization header."""

from __future__ import annotations

import hmac

from chirpy.auth.errors import InvalidApiKeyError, MalformedHeaderError, MissingHeaderError


def _extract_scheme(authorization: str | None, scheme: str) -> str:
    """Return the credential from ``"<scheme> <credential>"``."""
    if not authorization:
        raise MissingHeaderError()
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != scheme or not parts[1]:
        raise MalformedHeaderError()
    return parts[1]


def extract_bearer(authorization: str | None) -> str:
    """Extract bearer token from Authorization header value."""
    return _extract_scheme(authorization, "Bearer")


def extract_api_key(authorization: str | None) -> str:
    """Extract API key from Authorization header value."""
    return _extract_scheme(authorization, "ApiKey")


def verify_api_key(presented: str, expected: str) -> None:
    """Raise ``InvalidApiKeyError`` unless ``presented`` equals ``expected``."""
    if not expected or not hmac.compare_digest(
        presented.encode("utf-8"), expected.encode("utf-8")
    ):
        raise InvalidApiKeyError()
