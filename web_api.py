from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chirpy.api.contracts import HealthResponse
from chirpy.api.http_setup import register_exception_handlers, register_http_middleware
from chirpy.auth.router import create_auth_router
from chirpy.auth.service import AuthService
from chirpy.auth.tokens import TokenService
from chirpy.chirps.router import create_chirps_router
from chirpy.chirps.service import ChirpsService
from chirpy.core.config import AppConfig
from chirpy.core.logging import setup_logging
from chirpy.store.database import JsonDocumentStore
from chirpy.webhooks.router import create_webhooks_router

APP_ROOT = Path(__file__).resolve().parent
LOGGER = logging.getLogger(__name__)


def _store_path(config: AppConfig) -> Path:
    path = Path(config.store.path)
    return path if path.is_absolute() else APP_ROOT / path


def create_app(config: AppConfig) -> FastAPI:
    """Wire store, services and routers into a FastAPI app."""
    store = JsonDocumentStore(_store_path(config))
    tokens = TokenService(config.auth, store)
    auth_service = AuthService(store, tokens)
    chirps_service = ChirpsService(store)

    app = FastAPI(title="Chirpy")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.cors_allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    register_http_middleware(app, config=config, logger=LOGGER)
    register_exception_handlers(app, logger=LOGGER)

    @app.get("/api/healthz", response_model=HealthResponse)
    def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    app.include_router(create_auth_router(auth_service))
    app.include_router(create_chirps_router(chirps_service, auth_service))
    app.include_router(create_webhooks_router(store, config.webhooks.polka_key))

    LOGGER.info("app_ready", extra={"path": str(store.path)})
    return app


load_dotenv()
APP_CONFIG = AppConfig.from_env()
setup_logging(APP_CONFIG.logging)
app = create_app(APP_CONFIG)
