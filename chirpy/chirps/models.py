"""Pydantic request models for chirps."""

from __future__ import annotations

from pydantic import BaseModel


class ChirpRequest(BaseModel):
    """New chirp payload. Length is checked by the service."""

    body: str
