"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

LOGGER = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-insecure-secret-change-me"


@dataclass(frozen=True)
class AuthConfig:
    """Token signing and lifetime configuration."""

    secret_key: str
    access_token_ttl_seconds: int = 60 * 60
    refresh_token_ttl_seconds: int = 60 * 24 * 60 * 60
    access_issuer: str = "chirpy-access"
    refresh_issuer: str = "chirpy-refresh"


@dataclass(frozen=True)
class WebhookConfig:
    """Shared secret for machine-to-machine webhook calls."""

    polka_key: str


@dataclass(frozen=True)
class StoreConfig:
    """JSON document store location."""

    path: str


@dataclass(frozen=True)
class LoggingConfig:
    """Structured logging configuration."""

    level: str


@dataclass(frozen=True)
class SecurityConfig:
    """API perimeter security settings."""

    cors_allowed_origins: list[str]
    request_max_bytes: int


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    auth: AuthConfig
    webhooks: WebhookConfig
    store: StoreConfig
    logging: LoggingConfig
    security: SecurityConfig

    @staticmethod
    def from_env() -> "AppConfig":
        """Build app config from process environment."""
        secret_key = os.getenv("JWT_SECRET", "").strip()
        if not secret_key:
            LOGGER.warning("JWT_SECRET is not set, using insecure development secret")
            secret_key = DEV_SECRET_KEY
        access_ttl = int(os.getenv("AUTH_ACCESS_TOKEN_TTL_SECONDS", "3600"))
        refresh_ttl = int(os.getenv("AUTH_REFRESH_TOKEN_TTL_SECONDS", "5184000"))
        access_issuer = (
            os.getenv("AUTH_ACCESS_ISSUER", "chirpy-access").strip() or "chirpy-access"
        )
        refresh_issuer = (
            os.getenv("AUTH_REFRESH_ISSUER", "chirpy-refresh").strip()
            or "chirpy-refresh"
        )
        polka_key = os.getenv("POLKA_KEY", "").strip()
        store_path = (
            os.getenv("CHIRPY_DB_PATH", "runtime/database.json").strip()
            or "runtime/database.json"
        )
        log_level = os.getenv("LOG_LEVEL", "INFO").strip() or "INFO"
        cors_allowed_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        request_max_bytes = int(os.getenv("REQUEST_MAX_BYTES", str(1024 * 1024)))

        if access_issuer == refresh_issuer:
            raise ValueError("Access and refresh issuers must differ")

        return AppConfig(
            auth=AuthConfig(
                secret_key=secret_key,
                access_token_ttl_seconds=access_ttl,
                refresh_token_ttl_seconds=refresh_ttl,
                access_issuer=access_issuer,
                refresh_issuer=refresh_issuer,
            ),
            webhooks=WebhookConfig(polka_key=polka_key),
            store=StoreConfig(path=store_path),
            logging=LoggingConfig(level=log_level),
            security=SecurityConfig(
                cors_allowed_origins=cors_allowed_origins,
                request_max_bytes=request_max_bytes,
            ),
        )
