"""Failure kinds surfaced by the route/order and account stores."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every failure raised by a store operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(StoreError):
    """A required field is missing or structurally unusable."""


class NotFoundError(StoreError):
    """Lookup by id/username yielded nothing."""


class ConflictError(StoreError):
    """An account with the same normalized username already exists."""


class ValidationError(StoreError):
    """A registration field failed one of its declared rules."""


class UnauthorizedError(StoreError):
    """Login credentials do not match any stored account."""
