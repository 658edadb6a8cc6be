from __future__ import annotations

import json
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from chirpy.store.database import JsonDocumentStore
from chirpy.store.errors import (
    DuplicateEmailError,
    NotFoundError,
    StoreDecodeError,
    StoreIOError,
)
from chirpy.store.models import Chirp, Document


def _store(tmp_path: Path) -> JsonDocumentStore:
    return JsonDocumentStore(tmp_path / "data" / "database.json")


def test_store_creates_empty_document(tmp_path: Path) -> None:
    store = _store(tmp_path)

    raw = json.loads(store.path.read_text(encoding="utf-8"))
    document = store.load()

    assert raw["chirps"] == {} and raw["users"] == {} and raw["tokens"] == {}
    assert document.next_user_id == 1
    assert document.next_chirp_id == 1


def test_store_keeps_existing_file(tmp_path: Path) -> None:
    first = _store(tmp_path)
    first.create_user("a@b.com", "hash")

    second = _store(tmp_path)

    assert second.get_user(1).email == "a@b.com"


def test_create_and_find_user(tmp_path: Path) -> None:
    store = _store(tmp_path)

    user = store.create_user(" A@B.com ", "hash")

    assert user.id == 1
    assert user.email == "a@b.com"
    assert store.get_user_by_email("a@B.COM").id == 1
    assert store.get_user(1).password_hash == "hash"


def test_create_user_rejects_duplicate_email(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create_user("a@b.com", "hash")

    with pytest.raises(DuplicateEmailError):
        store.create_user("A@b.com", "other")


def test_update_user_rejects_email_of_other_user(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create_user("a@b.com", "h1")
    store.create_user("c@d.com", "h2")

    updated = store.update_user(1, "a@b.com", "h3")
    with pytest.raises(DuplicateEmailError):
        store.update_user(1, "c@d.com", "h4")

    assert updated.password_hash == "h3"
    assert store.get_user(1).password_hash == "h3"


def test_missing_lookups_raise_not_found(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with pytest.raises(NotFoundError):
        store.get_user(1)
    with pytest.raises(NotFoundError):
        store.get_user_by_email("nobody@b.com")
    with pytest.raises(NotFoundError):
        store.get_chirp(1)
    with pytest.raises(NotFoundError):
        store.update_user(5, "x@y.com", "h")
    with pytest.raises(NotFoundError):
        store.upgrade_user(5)
    with pytest.raises(NotFoundError):
        store.delete_chirp(5)


def test_upgrade_and_delete_user(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create_user("a@b.com", "hash")

    assert store.upgrade_user(1).is_chirpy_red is True
    store.delete_user(1)

    with pytest.raises(NotFoundError):
        store.get_user(1)
    with pytest.raises(NotFoundError):
        store.delete_user(1)


def test_ids_are_not_reused_after_delete(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create_chirp(7, "one")
    store.create_chirp(7, "two")
    store.delete_chirp(1)

    third = store.create_chirp(7, "three")

    assert third.id == 3
    assert [chirp.id for chirp in store.list_chirps()] == [2, 3]


def test_is_chirp_author(tmp_path: Path) -> None:
    store = _store(tmp_path)
    chirp = store.create_chirp(7, "hello")

    assert store.is_chirp_author(7, chirp.id) is True
    assert store.is_chirp_author(8, chirp.id) is False
    assert store.is_chirp_author(7, 99) is False


def test_legacy_document_without_counters(tmp_path: Path) -> None:
    path = tmp_path / "database.json"
    path.write_text(
        json.dumps(
            {
                "chirps": {
                    "1": {"id": 1, "author_id": 1, "body": "a"},
                    "3": {"id": 3, "author_id": 1, "body": "c"},
                },
                "users": {},
                "tokens": {},
            }
        ),
        encoding="utf-8",
    )
    store = JsonDocumentStore(path)

    assert store.create_chirp(1, "d").id == 4
    assert store.create_user("a@b.com", "h").id == 1


def test_refresh_token_revocation(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.add_refresh_token("t1")

    assert store.is_refresh_token_revoked("t1") is False
    assert store.is_refresh_token_revoked("never-issued") is False

    store.revoke_refresh_token("t1")
    store.revoke_refresh_token("t1")
    record = store.load().tokens["t1"]

    assert store.is_refresh_token_revoked("t1") is True
    assert record.revoked is True
    assert record.revoked_at is not None


def test_revoking_unknown_token_records_it(tmp_path: Path) -> None:
    store = _store(tmp_path)

    store.revoke_refresh_token("unknown")

    assert store.is_refresh_token_revoked("unknown") is True


def test_malformed_file_aborts_operation_and_is_left_untouched(tmp_path: Path) -> None:
    path = tmp_path / "database.json"
    path.write_text("{ invalid", encoding="utf-8")
    store = JsonDocumentStore(path)

    with pytest.raises(StoreDecodeError):
        store.create_user("a@b.com", "hash")
    with pytest.raises(StoreDecodeError):
        store.list_chirps()

    assert path.read_text(encoding="utf-8") == "{ invalid"


def test_save_leaves_no_temporary_files(tmp_path: Path) -> None:
    store = JsonDocumentStore(tmp_path / "database.json")
    store.create_user("a@b.com", "hash")
    store.create_chirp(1, "hello")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["database.json"]


def test_save_replaces_whole_document(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create_user("a@b.com", "hash")
    store.add_refresh_token("old-token")

    replacement = Document(
        chirps={5: Chirp(id=5, author_id=2, body="kept")},
        next_chirp_id=9,
        next_user_id=7,
    )
    store.save(replacement)
    reloaded = _store(tmp_path).load()

    assert reloaded == replacement
    assert reloaded.users == {} and reloaded.tokens == {}
    assert store.create_chirp(2, "next").id == 9
    assert store.create_user("c@d.com", "hash").id == 7


def test_write_failure_raises_store_io_error(tmp_path: Path) -> None:
    store = _store(tmp_path)
    shutil.rmtree(tmp_path / "data")

    with pytest.raises(StoreIOError):
        store.save(Document())
    with pytest.raises(StoreIOError):
        store.add_refresh_token("token")


def test_concurrent_token_writes_are_serialized(tmp_path: Path) -> None:
    store = _store(tmp_path)
    tokens = [f"token-{index}" for index in range(40)]

    def issue_and_revoke(token: str) -> None:
        store.add_refresh_token(token)
        store.revoke_refresh_token(token)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(issue_and_revoke, tokens))

    records = store.load().tokens
    assert sorted(records) == sorted(tokens)
    assert all(record.revoked for record in records.values())


def test_concurrent_user_creation_assigns_unique_ids(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with ThreadPoolExecutor(max_workers=8) as pool:
        users = list(
            pool.map(lambda i: store.create_user(f"u{i}@b.com", "h"), range(25))
        )

    assert sorted(user.id for user in users) == list(range(1, 26))
    assert len(store.load().users) == 25
