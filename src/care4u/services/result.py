"""Result type returned by the auth orchestrator.

Every public ``AuthService`` operation returns either ``Ok(value)`` or
``Err(kind, message)``; nothing else escapes the service boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(StrEnum):
    USER_NOT_FOUND = "user_not_found"
    # Wrong code and expired code are deliberately one kind.
    INVALID_OR_EXPIRED_OTP = "invalid_or_expired_otp"
    PROFILE_ALREADY_COMPLETE = "profile_already_complete"
    PROFILE_NOT_FOUND = "profile_not_found"
    VALIDATION_FAILED = "validation_failed"
    # Malformed, expired and badly signed tokens are one kind.
    INVALID_TOKEN = "invalid_token"
    DELIVERY_FAILED = "delivery_failed"
    STORAGE_FAILURE = "storage_failure"


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be trusted, for any reason."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def success(self) -> bool:
        return False


Result = Ok[T] | Err
