"""
Account and session use cases.

Users live in one list document; the default ``Eldar`` account is restored on
every read when the stored list lacks it. Records leaving ``login``,
``register`` and ``current_user`` never carry the password.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from slowtravel.core.errors import ConflictError, InvalidInputError, UnauthorizedError, ValidationError
from slowtravel.core.security import hash_password, verify_password
from slowtravel.core.utils import inbound_copy, now_iso, simulate_latency, strip_password
from slowtravel.domain.accounts import (
    DEFAULT_EMAIL,
    DEFAULT_PASSWORD,
    DEFAULT_USERNAME,
    normalize_user,
    normalize_username,
    registration_error,
    same_username,
)
from slowtravel.domain.normalize import to_text
from slowtravel.repositories.blob_store import BlobStore, StorageMedium
from slowtravel.services.session_service import SessionStore

logger = logging.getLogger(__name__)

USERS_KEY = "react-auth-users-v1"


class AuthService:
    """Handles user lookup/creation, login, registration and the session."""

    def __init__(
        self,
        storage: Optional[StorageMedium],
        *,
        latency_ms: int | None = None,
        password_scheme: str | None = None,
    ) -> None:
        self.password_scheme = password_scheme
        self.latency_ms = latency_ms
        self.users = BlobStore(storage, USERS_KEY, lambda: self.ensure_default_user([]), self.coerce_users)
        self.session = SessionStore(storage)

    # -------------------------------------- helpers --------------------------------------
    async def _respond(self, value):
        return await simulate_latency(value, self.latency_ms)

    def default_user(self) -> dict:
        return {
            "username": DEFAULT_USERNAME,
            "password": hash_password(DEFAULT_PASSWORD, self.password_scheme),
            "firstName": DEFAULT_USERNAME,
            "lastName": "",
            "email": DEFAULT_EMAIL,
            "createdAt": now_iso(),
        }

    def ensure_default_user(self, users: list) -> list[dict]:
        """Normalize stored users, drop repeated usernames and prepend the default account if missing."""
        stamp = now_iso()
        normalized: list[dict] = []
        for candidate in users:
            user = normalize_user(candidate, created_at=stamp)
            if user and not any(same_username(user["username"], kept["username"]) for kept in normalized):
                normalized.append(user)
        if any(same_username(user["username"], DEFAULT_USERNAME) for user in normalized):
            return normalized
        return [self.default_user(), *normalized]

    def coerce_users(self, value: Any) -> list[dict]:
        return self.ensure_default_user(value if isinstance(value, list) else [])

    def _lookup(self, username: Any) -> Optional[dict]:
        name = normalize_username(username)
        if not name:
            return None
        for user in self.users.read():
            if same_username(user["username"], name):
                return user
        return None

    # -------------------------------------- users --------------------------------------
    async def list_users(self) -> list[dict]:
        return await self._respond(self.users.read())

    async def find_user_by_username(self, username: str) -> Optional[dict]:
        """Case-insensitive lookup; returns None when nobody matches."""
        return await self._respond(self._lookup(username))

    def _create_user(self, form: Mapping[str, Any]) -> dict:
        username = normalize_username(form.get("username"))
        if not username:
            raise InvalidInputError("Username is required")

        with self.users.transaction() as users:
            if any(same_username(user["username"], username) for user in users):
                raise ConflictError("A user with this username already exists")
            user = normalize_user(
                {
                    "username": username,
                    "password": hash_password(str(form.get("password") or ""), self.password_scheme),
                    "firstName": to_text(form.get("firstName")),
                    "lastName": to_text(form.get("lastName")),
                    "email": to_text(form.get("email")),
                },
                created_at=now_iso(),
            )
            users.insert(0, user)
        logger.info("Created user %s", username)
        return user

    async def create_user(self, form: Mapping[str, Any] | None) -> dict:
        return await self._respond(self._create_user(inbound_copy(form)))

    # -------------------------------------- login --------------------------------------
    async def login(self, credentials: Mapping[str, Any] | None) -> dict:
        credentials = inbound_copy(credentials)
        found = self._lookup(credentials.get("username"))
        password = "" if credentials.get("password") is None else str(credentials.get("password"))
        if not found or not verify_password(password, found["password"], self.password_scheme):
            logger.info("Rejected login for %s", normalize_username(credentials.get("username")))
            raise UnauthorizedError("Invalid username or password")
        self.session.write(found["username"])
        return await self._respond(strip_password(found))

    # -------------------------------------- registration --------------------------------------
    async def register(self, form: Mapping[str, Any] | None) -> dict:
        """
        Validate the sign-up form rule by rule, create the account and open a
        session for it. The first failing rule is the one reported.
        """
        form = inbound_copy(form)
        error = registration_error(form)
        if error:
            raise ValidationError(error)
        created = self._create_user(
            {
                "username": normalize_username(form.get("username")),
                "password": str(form.get("password")),
                "firstName": to_text(form.get("firstName")),
                "lastName": to_text(form.get("lastName")),
                "email": to_text(form.get("email")),
            }
        )
        self.session.write(created["username"])
        return await self._respond(strip_password(created))

    async def logout(self) -> None:
        self.session.clear()
        await self._respond(None)

    async def current_user(self) -> Optional[dict]:
        """Account behind the active session, or None."""
        session = self.session.read()
        if not session:
            return await self._respond(None)
        return await self._respond(strip_password(self._lookup(session["username"])))
