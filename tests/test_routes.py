from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi import APIRouter
from fastapi.routing import APIRoute

from chirpy.auth.dependencies import (
    create_access_dependency,
    create_api_key_dependency,
    create_refresh_dependency,
)
from chirpy.auth.errors import (
    InvalidApiKeyError,
    MissingHeaderError,
    RevokedTokenError,
    WrongTokenTypeError,
)
from chirpy.auth.models import CredentialsRequest
from chirpy.auth.router import create_auth_router
from chirpy.auth.service import AuthService
from chirpy.auth.tokens import TokenService
from chirpy.chirps.errors import NotChirpAuthorError
from chirpy.chirps.models import ChirpRequest
from chirpy.chirps.router import create_chirps_router
from chirpy.chirps.service import ChirpsService
from chirpy.core.config import AuthConfig
from chirpy.store.database import JsonDocumentStore
from chirpy.store.errors import NotFoundError
from chirpy.webhooks.router import WebhookData, WebhookEvent, create_webhooks_router


def _routers(tmp_path: Path) -> list[APIRouter]:
    store = JsonDocumentStore(tmp_path / "database.json")
    auth = AuthService(store, TokenService(AuthConfig(secret_key="route-secret"), store))
    return [
        create_auth_router(auth),
        create_chirps_router(ChirpsService(store), auth),
        create_webhooks_router(store, "polka-key"),
    ]


def _endpoint(routers: list[APIRouter], path: str, method: str) -> Callable[..., Any]:
    routes = [route for router in routers for route in router.routes]
    for route in routes:
        if isinstance(route, APIRoute) and route.path == path and method in route.methods:
            return route.endpoint
    raise AssertionError(f"Route {method} {path} not found")


def _auth_service(tmp_path: Path) -> AuthService:
    store = JsonDocumentStore(tmp_path / "database.json")
    return AuthService(store, TokenService(AuthConfig(secret_key="route-secret"), store))


def test_user_login_refresh_revoke_flow(tmp_path: Path) -> None:
    routers = _routers(tmp_path)
    creds = CredentialsRequest(email="a@b.com", password="secret1")

    created = _endpoint(routers, "/api/users", "POST")(req=creds)
    session = _endpoint(routers, "/api/login", "POST")(req=creds)

    assert created.model_dump() == {"id": 1, "email": "a@b.com", "is_chirpy_red": False}
    assert session.id == 1
    assert session.token and session.refresh_token

    refresh_dep = create_refresh_dependency()
    credential = refresh_dep(authorization=f"Bearer {session.refresh_token}")
    refreshed = _endpoint(routers, "/api/refresh", "POST")(credential=credential)
    assert refreshed.token

    _endpoint(routers, "/api/revoke", "POST")(credential=credential)
    with pytest.raises(RevokedTokenError):
        _endpoint(routers, "/api/refresh", "POST")(credential=credential)


def test_access_dependency_resolves_user_id(tmp_path: Path) -> None:
    service = _auth_service(tmp_path)
    service.register("a@b.com", "secret1")
    session = service.login("a@b.com", "secret1")
    require_user_id = create_access_dependency(service)

    assert require_user_id(authorization=f"Bearer {session.access_token}") == 1
    with pytest.raises(MissingHeaderError):
        require_user_id(authorization=None)
    with pytest.raises(WrongTokenTypeError):
        require_user_id(authorization=f"Bearer {session.refresh_token}")


def test_chirp_routes(tmp_path: Path) -> None:
    routers = _routers(tmp_path)

    created = _endpoint(routers, "/api/chirps", "POST")(
        req=ChirpRequest(body="a fornax day"), user_id=7
    )
    fetched = _endpoint(routers, "/api/chirps/{chirp_id}", "GET")(chirp_id=created.id)
    listed = _endpoint(routers, "/api/chirps", "GET")(author_id=7, sort="asc")

    assert fetched.body == "a **** day"
    assert fetched.author_id == 7
    assert [chirp.id for chirp in listed] == [created.id]

    delete = _endpoint(routers, "/api/chirps/{chirp_id}", "DELETE")
    with pytest.raises(NotChirpAuthorError):
        delete(chirp_id=created.id, user_id=8)
    delete(chirp_id=created.id, user_id=7)
    with pytest.raises(NotFoundError):
        _endpoint(routers, "/api/chirps/{chirp_id}", "GET")(chirp_id=created.id)


def test_webhook_upgrades_user(tmp_path: Path) -> None:
    routers = _routers(tmp_path)
    creds = CredentialsRequest(email="a@b.com", password="secret1")
    _endpoint(routers, "/api/users", "POST")(req=creds)
    webhook = _endpoint(routers, "/api/polka/webhooks", "POST")

    webhook(req=WebhookEvent(event="user.payment_failed", data=WebhookData(user_id=1)))
    assert _endpoint(routers, "/api/login", "POST")(req=creds).is_chirpy_red is False

    webhook(req=WebhookEvent(event="user.upgraded", data=WebhookData(user_id=1)))
    assert _endpoint(routers, "/api/login", "POST")(req=creds).is_chirpy_red is True

    with pytest.raises(NotFoundError):
        webhook(req=WebhookEvent(event="user.upgraded", data=WebhookData(user_id=99)))


def test_api_key_dependency() -> None:
    require_api_key = create_api_key_dependency("polka-key")

    require_api_key(authorization="ApiKey polka-key")
    with pytest.raises(InvalidApiKeyError):
        require_api_key(authorization="ApiKey other")
    with pytest.raises(InvalidApiKeyError):
        create_api_key_dependency("")(authorization="ApiKey anything")
