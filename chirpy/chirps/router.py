"""Chirps API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from chirpy.api.contracts import ApiErrorResponse, ChirpResponse
from chirpy.auth.dependencies import create_access_dependency
from chirpy.auth.service import AuthService
from chirpy.chirps.models import ChirpRequest
from chirpy.chirps.service import ChirpsService, SortOrder


def create_chirps_router(service: ChirpsService, auth: AuthService) -> APIRouter:
    """Build router with chirp create/list/get/delete endpoints."""
    router = APIRouter(tags=["chirps"])
    require_user_id = create_access_dependency(auth)

    @router.post(
        "/api/chirps",
        status_code=201,
        response_model=ChirpResponse,
        responses={400: {"model": ApiErrorResponse}, 401: {"model": ApiErrorResponse}},
    )
    def create_chirp(
        req: ChirpRequest, user_id: int = Depends(require_user_id)
    ) -> ChirpResponse:
        """Post a chirp as the authenticated user."""
        return ChirpResponse.from_chirp(service.create(user_id, req.body))

    @router.get("/api/chirps", response_model=list[ChirpResponse])
    def list_chirps(
        author_id: int | None = Query(default=None),
        sort: SortOrder = Query(default="asc"),
    ) -> list[ChirpResponse]:
        """List chirps, optionally filtered by author."""
        chirps = service.list_chirps(author_id=author_id, sort=sort)
        return [ChirpResponse.from_chirp(chirp) for chirp in chirps]

    @router.get(
        "/api/chirps/{chirp_id}",
        response_model=ChirpResponse,
        responses={404: {"model": ApiErrorResponse}},
    )
    def get_chirp(chirp_id: int) -> ChirpResponse:
        """Fetch one chirp."""
        return ChirpResponse.from_chirp(service.get(chirp_id))

    @router.delete(
        "/api/chirps/{chirp_id}",
        status_code=204,
        responses={
            401: {"model": ApiErrorResponse},
            403: {"model": ApiErrorResponse},
            404: {"model": ApiErrorResponse},
        },
    )
    def delete_chirp(chirp_id: int, user_id: int = Depends(require_user_id)) -> None:
        """Delete one of the caller's chirps."""
        service.delete(chirp_id, requester_id=user_id)

    return router
