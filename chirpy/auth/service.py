"""Authentication service for registration, login, refresh and revocation."""

from __future__ import annotations

import logging

from chirpy.api.errors import ApiError, ApiErrorCode
from chirpy.auth.errors import InvalidCredentialsError, MalformedTokenError
from chirpy.auth.models import AuthSession
from chirpy.auth.tokens import TokenKind, TokenService
from chirpy.core.security import hash_password, verify_password
from chirpy.store.database import JsonDocumentStore
from chirpy.store.errors import NotFoundError
from chirpy.store.models import User

LOGGER = logging.getLogger(__name__)


def parse_subject(subject: str) -> int:
    """Convert a verified token subject into a user id."""
    try:
        user_id = int(subject)
    except ValueError as exc:
        raise MalformedTokenError("Token subject is not a user id") from exc
    if user_id < 1:
        raise MalformedTokenError("Token subject is not a user id")
    return user_id


def _require_credentials(email: str, password: str) -> None:
    if not email.strip() or not password:
        raise ApiError(
            status_code=422,
            error_code=ApiErrorCode.VALIDATION_ERROR,
            message="Email and password are required",
        )


class AuthService:
    """Authentication domain service."""

    def __init__(self, store: JsonDocumentStore, tokens: TokenService) -> None:
        """Initialize service dependencies."""
        self._store = store
        self._tokens = tokens

    @property
    def tokens(self) -> TokenService:
        return self._tokens

    def register(self, email: str, password: str) -> User:
        """Create a user with a hashed password."""
        _require_credentials(email, password)
        return self._store.create_user(email, hash_password(password))

    def update_credentials(self, user_id: int, email: str, password: str) -> User:
        """Replace a user's email and password."""
        _require_credentials(email, password)
        user = self._store.update_user(user_id, email, hash_password(password))
        LOGGER.info("user_credentials_updated", extra={"user_id": user_id})
        return user

    def login(self, email: str, password: str) -> AuthSession:
        """Authenticate credentials and issue access/refresh token pair.

        Unknown email and wrong password fail the same way.
        """
        try:
            user = self._store.get_user_by_email(email)
        except NotFoundError:
            raise InvalidCredentialsError() from None
        if not verify_password(password, user.password_hash):
            LOGGER.info("login_failed", extra={"user_id": user.id})
            raise InvalidCredentialsError()

        access_token = self._tokens.mint(TokenKind.ACCESS, user.id)
        refresh_token = self._tokens.mint(TokenKind.REFRESH, user.id)
        self._store.add_refresh_token(refresh_token)
        LOGGER.info("login_succeeded", extra={"user_id": user.id})
        return AuthSession(
            user=user, access_token=access_token, refresh_token=refresh_token
        )

    def refresh(self, refresh_token: str) -> str:
        """Mint a new access token from a valid, unrevoked refresh token."""
        subject = self._tokens.verify(refresh_token, TokenKind.REFRESH)
        return self._tokens.mint(TokenKind.ACCESS, parse_subject(subject))

    def revoke(self, refresh_token: str) -> None:
        """Revoke a refresh token. Revoking twice is not an error."""
        claims = self._tokens.decode(refresh_token, TokenKind.REFRESH)
        self._store.revoke_refresh_token(refresh_token)
        LOGGER.info("refresh_token_revoked", extra={"user_id": claims.sub})

    def verify_access_token(self, token: str) -> int:
        """Validate access token and return the caller's user id."""
        return parse_subject(self._tokens.verify(token, TokenKind.ACCESS))
