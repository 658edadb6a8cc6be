"""Single-file JSON document store shared by users, chirps and refresh tokens."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from chirpy.store.errors import (
    DuplicateEmailError,
    NotFoundError,
    StoreDecodeError,
    StoreIOError,
)
from chirpy.store.models import Chirp, Document, RefreshTokenRecord, User
from chirpy.store.rwlock import ReadWriteLock

LOGGER = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _find_user_by_email(document: Document, email: str) -> User | None:
    key = normalize_email(email)
    for user in document.users.values():
        if normalize_email(user.email) == key:
            return user
    return None


class JsonDocumentStore:
    """Whole-document store guarded by one reader/writer lock.

    Every mutation holds the write lock across load, change and save, so
    concurrent read-modify-write cycles cannot lose updates. Saves go through
    a temporary file that is renamed over the target.
    """

    def __init__(self, path: Path) -> None:
        """Bind store to ``path`` and create an empty document if absent."""
        self._path = Path(path)
        self._lock = ReadWriteLock()
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_file(self) -> None:
        with self._lock.write():
            if self._path.exists():
                return
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StoreIOError(f"Cannot create store directory: {exc}") from exc
            self._write(Document())
            LOGGER.info("store_created", extra={"path": str(self._path)})

    def _read(self) -> Document:
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            raise StoreIOError(f"Cannot read store file: {exc}") from exc
        try:
            return Document.model_validate_json(raw)
        except ValidationError as exc:
            raise StoreDecodeError(f"Store file is not a valid document: {exc}") from exc

    def _write(self, document: Document) -> None:
        data = document.model_dump_json(indent=2)
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self._path.parent), prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreIOError(f"Cannot write store file: {exc}") from exc

    @contextmanager
    def _mutate(self) -> Iterator[Document]:
        """Yield the current document and persist it if the block succeeds."""
        with self._lock.write():
            document = self._read()
            yield document
            self._write(document)

    def load(self) -> Document:
        """Return a snapshot of the whole document."""
        with self._lock.read():
            return self._read()

    def save(self, document: Document) -> None:
        """Replace the whole document."""
        with self._lock.write():
            self._write(document)

    # Users

    def create_user(self, email: str, password_hash: str) -> User:
        """Create a user with the next sequential id."""
        with self._mutate() as document:
            if _find_user_by_email(document, email) is not None:
                raise DuplicateEmailError(email)
            user = User(
                id=document.next_user_id,
                email=normalize_email(email),
                password_hash=password_hash,
            )
            document.users[user.id] = user
            document.next_user_id += 1
        LOGGER.info("user_created", extra={"user_id": user.id})
        return user

    def update_user(self, user_id: int, email: str, password_hash: str) -> User:
        """Replace email and password hash of an existing user."""
        with self._mutate() as document:
            user = document.users.get(user_id)
            if user is None:
                raise NotFoundError("user", user_id)
            owner = _find_user_by_email(document, email)
            if owner is not None and owner.id != user_id:
                raise DuplicateEmailError(email)
            user.email = normalize_email(email)
            user.password_hash = password_hash
        return user

    def upgrade_user(self, user_id: int) -> User:
        """Set the privilege flag on a user."""
        with self._mutate() as document:
            user = document.users.get(user_id)
            if user is None:
                raise NotFoundError("user", user_id)
            user.is_chirpy_red = True
        LOGGER.info("user_upgraded", extra={"user_id": user_id})
        return user

    def delete_user(self, user_id: int) -> None:
        with self._mutate() as document:
            if document.users.pop(user_id, None) is None:
                raise NotFoundError("user", user_id)

    def get_user(self, user_id: int) -> User:
        user = self.load().users.get(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def get_user_by_email(self, email: str) -> User:
        user = _find_user_by_email(self.load(), email)
        if user is None:
            raise NotFoundError("user", normalize_email(email))
        return user

    # Chirps

    def create_chirp(self, author_id: int, body: str) -> Chirp:
        """Create a chirp with the next sequential id."""
        with self._mutate() as document:
            chirp = Chirp(id=document.next_chirp_id, author_id=author_id, body=body)
            document.chirps[chirp.id] = chirp
            document.next_chirp_id += 1
        LOGGER.info("chirp_created", extra={"chirp_id": chirp.id, "user_id": author_id})
        return chirp

    def get_chirp(self, chirp_id: int) -> Chirp:
        chirp = self.load().chirps.get(chirp_id)
        if chirp is None:
            raise NotFoundError("chirp", chirp_id)
        return chirp

    def list_chirps(self) -> list[Chirp]:
        """Return all chirps ordered by id."""
        chirps = self.load().chirps
        return [chirps[chirp_id] for chirp_id in sorted(chirps)]

    def delete_chirp(self, chirp_id: int) -> None:
        with self._mutate() as document:
            if document.chirps.pop(chirp_id, None) is None:
                raise NotFoundError("chirp", chirp_id)
        LOGGER.info("chirp_deleted", extra={"chirp_id": chirp_id})

    def is_chirp_author(self, author_id: int, chirp_id: int) -> bool:
        chirp = self.load().chirps.get(chirp_id)
        return chirp is not None and chirp.author_id == author_id

    # Refresh tokens

    def add_refresh_token(self, token: str) -> None:
        """Record an issued refresh token as not revoked."""
        with self._mutate() as document:
            document.tokens[token] = RefreshTokenRecord()

    def revoke_refresh_token(self, token: str) -> None:
        """Mark a refresh token revoked, recording it if it was never seen."""
        with self._mutate() as document:
            record = document.tokens.get(token)
            if record is not None and record.revoked:
                return
            document.tokens[token] = RefreshTokenRecord(
                revoked=True, revoked_at=datetime.now(timezone.utc)
            )

    def is_refresh_token_revoked(self, token: str) -> bool:
        """Return True only when a record exists and is revoked.

        Tokens with no record are treated as not revoked.
        """
        record = self.load().tokens.get(token)
        return record is not None and record.revoked
