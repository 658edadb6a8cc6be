"""Typed authentication and authorization failures."""

from __future__ import annotations

from chirpy.api.errors import ApiErrorCode


class AuthError(Exception):
    """Base class for failures that deny the caller an identity."""

    error_code: ApiErrorCode = ApiErrorCode.AUTH_TOKEN_MALFORMED
    status_code: int = 401
    default_message: str = "Unauthorized"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class MissingHeaderError(AuthError):
    error_code = ApiErrorCode.AUTH_MISSING_HEADER
    default_message = "Authorization header not included"


class MalformedHeaderError(AuthError):
    error_code = ApiErrorCode.AUTH_MALFORMED_HEADER
    default_message = "Malformed authorization header"


class InvalidApiKeyError(AuthError):
    error_code = ApiErrorCode.AUTH_INVALID_API_KEY
    default_message = "Invalid API key"


class InvalidCredentialsError(AuthError):
    error_code = ApiErrorCode.AUTH_INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class MalformedTokenError(AuthError):
    error_code = ApiErrorCode.AUTH_TOKEN_MALFORMED
    default_message = "Malformed token"


class InvalidSignatureError(AuthError):
    error_code = ApiErrorCode.AUTH_TOKEN_INVALID_SIGNATURE
    default_message = "Invalid token signature"


class ExpiredTokenError(AuthError):
    error_code = ApiErrorCode.AUTH_TOKEN_EXPIRED
    default_message = "Token expired"


class WrongTokenTypeError(AuthError):
    error_code = ApiErrorCode.AUTH_TOKEN_WRONG_TYPE
    default_message = "Invalid token type"


class RevokedTokenError(AuthError):
    error_code = ApiErrorCode.AUTH_TOKEN_REVOKED
    default_message = "Revoked token"
