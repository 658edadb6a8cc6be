"""Chirp domain failures."""

from __future__ import annotations


class ChirpTooLongError(ValueError):
    """Chirp body exceeds the allowed length."""

    def __init__(self, max_length: int) -> None:
        super().__init__(f"Chirp is too long (max {max_length} characters)")
        self.max_length = max_length


class NotChirpAuthorError(Exception):
    """Caller tried to change a chirp written by someone else."""

    def __init__(self, chirp_id: int) -> None:
        super().__init__(f"Not author of chirp {chirp_id}")
        self.chirp_id = chirp_id
