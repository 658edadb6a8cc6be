"""Security primitives for password hashing and token signing."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import os
from typing import Any

PASSWORD_HASH_ALGORITHM = "pbkdf2_sha256"
PASSWORD_HASH_ROUNDS = 120_000


class HashingError(Exception):
    """Password hashing failed for a reason other than a mismatch."""


class TokenSignatureMismatch(ValueError):
    """Token signature does not match the signing input."""


def _b64url_encode(raw: bytes) -> str:
    """Return URL-safe base64 string without padding."""
    return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")


def _b64url_decode(value: str) -> bytes:
    """Decode URL-safe base64 string with optional missing padding."""
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode((value + padding).encode("utf-8"))


def _derive(password: str, salt: bytes, rounds: int) -> bytes:
    try:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    except (ValueError, TypeError) as exc:
        raise HashingError("Password could not be hashed") from exc


def hash_password(password: str) -> str:
    """Hash password using PBKDF2-HMAC-SHA256 with random salt."""
    salt = os.urandom(16)
    derived = _derive(password, salt, PASSWORD_HASH_ROUNDS)
    return (
        f"{PASSWORD_HASH_ALGORITHM}${PASSWORD_HASH_ROUNDS}"
        f"${_b64url_encode(salt)}${_b64url_encode(derived)}"
    )


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify password against a stored PBKDF2 hash.

    A mismatch returns ``False``. A stored hash that cannot be parsed, or a
    password that cannot be encoded, raises ``HashingError``.
    """
    try:
        algo, rounds_raw, salt_b64, digest_b64 = stored_hash.split("$", 3)
        rounds = int(rounds_raw)
        salt = _b64url_decode(salt_b64)
        expected = _b64url_decode(digest_b64)
    except (ValueError, binascii.Error) as exc:
        raise HashingError("Stored password hash is malformed") from exc
    if algo != PASSWORD_HASH_ALGORITHM or rounds < 1:
        raise HashingError(f"Unsupported password hash algorithm: {algo}")

    derived = _derive(password, salt, rounds)
    return hmac.compare_digest(derived, expected)


def _sign(signing_input: bytes, secret_key: str) -> bytes:
    return hmac.new(secret_key.encode("utf-8"), signing_input, hashlib.sha256).digest()


def build_signed_token(payload: dict[str, Any], secret_key: str) -> str:
    """Create compact signed token using JWT-like 3-part structure."""
    header = {"alg": "HS256", "typ": "JWT"}
    header_part = _b64url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_part = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_part}.{payload_part}".encode("utf-8")
    signature_part = _b64url_encode(_sign(signing_input, secret_key))
    return f"{header_part}.{payload_part}.{signature_part}"


def decode_signed_token(token: str, secret_key: str) -> dict[str, Any]:
    """Verify a compact signed token and return its payload.

    Raises ``TokenSignatureMismatch`` when the signature does not verify and
    ``ValueError`` when the token is not a well-formed three-part token.
    Claim semantics (expiry, issuer) are left to the caller.
    """
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        raise ValueError("Malformed token")
    header_part, payload_part, signature_part = parts

    try:
        got_sig = _b64url_decode(signature_part)
    except (ValueError, binascii.Error) as exc:
        raise ValueError("Malformed token signature") from exc

    signing_input = f"{header_part}.{payload_part}".encode("utf-8")
    if not hmac.compare_digest(_sign(signing_input, secret_key), got_sig):
        raise TokenSignatureMismatch("Invalid token signature")

    try:
        header = json.loads(_b64url_decode(header_part).decode("utf-8"))
        payload = json.loads(_b64url_decode(payload_part).decode("utf-8"))
    except (ValueError, binascii.Error) as exc:
        raise ValueError("Invalid token payload") from exc

    if not isinstance(header, dict) or header.get("alg") != "HS256":
        raise ValueError("Unsupported token algorithm")
    if not isinstance(payload, dict):
        raise ValueError("Invalid token payload")
    return payload
