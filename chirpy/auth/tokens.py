"""Minting and verification of access and refresh tokens."""

from __future__ import annotations

import logging
import time
import uuid
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from chirpy.auth.errors import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    RevokedTokenError,
    WrongTokenTypeError,
)
from chirpy.core.config import AuthConfig
from chirpy.core.security import (
    TokenSignatureMismatch,
    build_signed_token,
    decode_signed_token,
)

LOGGER = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Kind of token, encoded into the issuer claim."""

    ACCESS = "access"
    REFRESH = "refresh"


class RevocationLookup(Protocol):
    """Store capability needed to honour refresh token revocation."""

    def is_refresh_token_revoked(self, token: str) -> bool: ...


class TokenClaims(BaseModel):
    """Required claims carried by every token."""

    model_config = ConfigDict(strict=True, extra="ignore")

    iss: str
    sub: str
    iat: int
    exp: int
    # Keeps tokens minted in the same second for the same subject distinct.
    jti: str = ""


class TokenService:
    """Issue and check HS256-signed tokens of two kinds."""

    def __init__(self, config: AuthConfig, revocations: RevocationLookup) -> None:
        self._config = config
        self._revocations = revocations

    def issuer_for(self, kind: TokenKind) -> str:
        if kind == TokenKind.ACCESS:
            return self._config.access_issuer
        return self._config.refresh_issuer

    def ttl_for(self, kind: TokenKind) -> int:
        if kind == TokenKind.ACCESS:
            return self._config.access_token_ttl_seconds
        return self._config.refresh_token_ttl_seconds

    def mint(self, kind: TokenKind, subject_id: int | str) -> str:
        """Build and sign a token of ``kind`` for ``subject_id``."""
        now_ts = int(time.time())
        claims = TokenClaims(
            iss=self.issuer_for(kind),
            sub=str(subject_id),
            iat=now_ts,
            exp=now_ts + self.ttl_for(kind),
            jti=uuid.uuid4().hex,
        )
        return build_signed_token(claims.model_dump(), self._config.secret_key)

    def decode(
        self, token: str, expected_kind: TokenKind, secret: str | None = None
    ) -> TokenClaims:
        """Check signature, claims shape, expiry and kind.

        Revocation state is not consulted; see ``verify``.
        """
        try:
            key = self._config.secret_key if secret is None else secret
            payload = decode_signed_token(token, key)
        except TokenSignatureMismatch as exc:
            raise InvalidSignatureError() from exc
        except ValueError as exc:
            raise MalformedTokenError(str(exc)) from exc

        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as exc:
            raise MalformedTokenError("Token claims are incomplete") from exc

        if claims.exp < int(time.time()):
            raise ExpiredTokenError()
        if claims.iss != self.issuer_for(expected_kind):
            raise WrongTokenTypeError()
        return claims

    def verify(
        self, token: str, expected_kind: TokenKind, secret: str | None = None
    ) -> str:
        """Return the token subject or raise an ``AuthError``.

        Refresh tokens are additionally checked against the store. A refresh
        token with no stored record is accepted.
        """
        claims = self.decode(token, expected_kind, secret)
        revocable = expected_kind == TokenKind.REFRESH
        if revocable and self._revocations.is_refresh_token_revoked(token):
            LOGGER.info("revoked_token_presented", extra={"user_id": claims.sub})
            raise RevokedTokenError()
        return claims.sub
