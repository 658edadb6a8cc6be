"""Public API response contracts."""

from chirpy.api.contracts.models import (
    ApiErrorResponse,
    ChirpResponse,
    HealthResponse,
    LoginResponse,
    TokenResponse,
    UserResponse,
)

__all__ = [
    "ApiErrorResponse",
    "ChirpResponse",
    "HealthResponse",
    "LoginResponse",
    "TokenResponse",
    "UserResponse",
]
