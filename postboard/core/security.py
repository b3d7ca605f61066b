"""Password hashing helpers (Argon2, salt embedded per hash)."""

from __future__ import annotations

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_LEGACY_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Create an Argon2id hash; the encoded string carries its own salt."""
    return _ph.hash(password)


def _legacy_verify(password: str, stored: str) -> bool:
    # bcrypt hashes written by earlier versions of the service
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        return False


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored:
        return False
    if stored.startswith(_LEGACY_PREFIXES):
        return _legacy_verify(password, stored)
    try:
        return _ph.verify(stored, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    """True for legacy hashes and for Argon2 hashes with weaker parameters than the current ones."""
    if stored_hash.startswith(_LEGACY_PREFIXES):
        return True
    try:
        return _ph.check_needs_rehash(stored_hash)
    except argon_exc.InvalidHashError:
        return True
