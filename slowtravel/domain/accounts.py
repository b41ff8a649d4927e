"""Domain helpers for user records and registration rules."""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from slowtravel.domain.normalize import to_text

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
MIN_PASSWORD_LENGTH = 6

DEFAULT_USERNAME = "Eldar"
DEFAULT_PASSWORD = "123123"
DEFAULT_EMAIL = "eldar@example.com"


def normalize_username(value: Any) -> str:
    return to_text(value)


def same_username(a: Any, b: Any) -> bool:
    """Usernames compare trimmed and case-insensitively."""
    return normalize_username(a).casefold() == normalize_username(b).casefold()


def is_valid_email(value: str | None) -> bool:
    """Return True when value has a ``local@domain.tld`` shape."""
    if not value:
        return False
    return bool(EMAIL_PATTERN.fullmatch(value))


def normalize_user(value: Any, *, created_at: str) -> Optional[dict]:
    """Canonical user record, or None when there is no usable username."""
    source = value if isinstance(value, Mapping) else {}
    username = normalize_username(source.get("username"))
    if not username:
        return None
    stamp = source.get("createdAt")
    return {
        "username": username,
        "password": "" if source.get("password") is None else str(source.get("password")),
        "firstName": "" if source.get("firstName") is None else str(source.get("firstName")),
        "lastName": "" if source.get("lastName") is None else str(source.get("lastName")),
        "email": "" if source.get("email") is None else str(source.get("email")),
        "createdAt": str(stamp) if stamp is not None else created_at,
    }


def registration_error(form: Mapping[str, Any]) -> Optional[str]:
    """
    First violated registration rule for ``form`` as a message, checked in a
    fixed order, or None when every rule passes.
    """
    password = "" if form.get("password") is None else str(form.get("password"))
    confirm = "" if form.get("confirmPassword") is None else str(form.get("confirmPassword"))
    email = to_text(form.get("email"))
    if not to_text(form.get("firstName")):
        return "First name is required"
    if not to_text(form.get("lastName")):
        return "Last name is required"
    if not email:
        return "Email is required"
    if not is_valid_email(email):
        return "Enter a valid email"
    if not normalize_username(form.get("username")):
        return "Username is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if password != confirm:
        return "Passwords do not match"
    return None
