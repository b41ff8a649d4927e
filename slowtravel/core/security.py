"""Password helpers (optional hashing and verification)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

from .config import get_settings

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str, scheme: str | None = None) -> str:
    """
    Value to persist for ``password``.

    The demo default keeps the plaintext; ``argon2`` stores a prefixed
    Argon2 hash instead.
    """
    scheme = scheme or get_settings().password_scheme
    if scheme == "argon2":
        return f"{_PREFIX}{_ph.hash(password)}"
    return password


def _same_text(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def verify_password(password: str, stored: str | None, scheme: str | None = None) -> bool:
    """
    Check ``password`` against a stored value of either scheme. Under
    ``plain`` an exact match always wins, so a plaintext password that happens
    to start with the hash prefix still verifies.
    """
    scheme = scheme or get_settings().password_scheme
    stored = stored or ""
    if scheme == "plain" and _same_text(password, stored):
        return True
    if stored.startswith(_PREFIX):
        try:
            return _ph.verify(stored[len(_PREFIX) :], password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    return _same_text(password, stored)
