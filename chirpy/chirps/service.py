"""Chirp creation, listing and author-only deletion."""

from __future__ import annotations

import logging
from typing import Literal

from chirpy.chirps.errors import ChirpTooLongError, NotChirpAuthorError
from chirpy.store.database import JsonDocumentStore
from chirpy.store.models import Chirp

LOGGER = logging.getLogger(__name__)

MAX_CHIRP_LENGTH = 140
BLOCKED_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
MASK = "****"

SortOrder = Literal["asc", "desc"]


def clean_body(body: str) -> str:
    """Mask blocked words, matching whole space-separated words only."""
    words = body.split(" ")
    return " ".join(MASK if word.lower() in BLOCKED_WORDS else word for word in words)


class ChirpsService:
    """Chirp domain service."""

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store

    def create(self, author_id: int, body: str) -> Chirp:
        """Validate, filter and store a chirp."""
        if len(body) > MAX_CHIRP_LENGTH:
            raise ChirpTooLongError(MAX_CHIRP_LENGTH)
        return self._store.create_chirp(author_id, clean_body(body))

    def list_chirps(
        self, author_id: int | None = None, sort: SortOrder = "asc"
    ) -> list[Chirp]:
        """List chirps, optionally for one author, ordered by id."""
        chirps = self._store.list_chirps()
        if author_id is not None:
            chirps = [chirp for chirp in chirps if chirp.author_id == author_id]
        if sort == "desc":
            chirps.reverse()
        return chirps

    def get(self, chirp_id: int) -> Chirp:
        return self._store.get_chirp(chirp_id)

    def delete(self, chirp_id: int, requester_id: int) -> None:
        """Delete a chirp on behalf of its author."""
        if not self._store.is_chirp_author(requester_id, chirp_id):
            # Distinguish a missing chirp from someone else's chirp.
            self._store.get_chirp(chirp_id)
            LOGGER.info(
                "chirp_delete_forbidden",
                extra={"chirp_id": chirp_id, "user_id": requester_id},
            )
            raise NotChirpAuthorError(chirp_id)
        self._store.delete_chirp(chirp_id)
