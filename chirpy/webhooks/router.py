"""Payment provider webhook router."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from chirpy.api.contracts import ApiErrorResponse
from chirpy.auth.dependencies import create_api_key_dependency
from chirpy.store.database import JsonDocumentStore

LOGGER = logging.getLogger(__name__)

USER_UPGRADED_EVENT = "user.upgraded"


class WebhookData(BaseModel):
    user_id: int = 0


class WebhookEvent(BaseModel):
    """Incoming webhook payload."""

    event: str
    data: WebhookData = Field(default_factory=WebhookData)


def create_webhooks_router(store: JsonDocumentStore, polka_key: str) -> APIRouter:
    """Build router for provider webhooks guarded by the shared API key."""
    router = APIRouter(tags=["webhooks"])
    require_api_key = create_api_key_dependency(polka_key)

    @router.post(
        "/api/polka/webhooks",
        status_code=204,
        dependencies=[Depends(require_api_key)],
        responses={401: {"model": ApiErrorResponse}, 404: {"model": ApiErrorResponse}},
    )
    def polka_webhook(req: WebhookEvent) -> None:
        """Apply ``user.upgraded`` events; acknowledge and ignore others."""
        if req.event != USER_UPGRADED_EVENT:
            LOGGER.info("webhook_ignored")
            return
        store.upgrade_user(req.data.user_id)

    return router
