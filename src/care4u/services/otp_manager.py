"""OTP lifecycle — issues, verifies and retires one-time codes."""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from care4u.database.repository import IdentityStore
from care4u.models.otp import OTPChallenge
from care4u.services.email_service import Notifier

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def utcnow() -> datetime:
    return datetime.now(UTC)


def generate_code() -> str:
    """Return a 6-digit code drawn uniformly from ``000000``–``999999``."""
    return "".join(secrets.choice(string.digits) for _ in range(OTP_LENGTH))


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@dataclass
class IssuedChallenge:
    """A freshly stored challenge and whether its email went out."""

    challenge: OTPChallenge
    delivered: bool


class OTPManager:
    """Owns the single-active-code-per-email policy.

    Issuing a code replaces whatever challenge the email already had, so
    an earlier code stops working even if it has not expired yet. A code
    verifies at most once, and only strictly before its expiry instant.
    """

    def __init__(
        self,
        store: IdentityStore,
        notifier: Notifier,
        ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
        code_factory: Callable[[], str] = generate_code,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._ttl = ttl
        self._clock = clock
        self._code_factory = code_factory

    async def issue(self, email: str) -> IssuedChallenge:
        """Store a new code for *email* and hand it to the notifier.

        A delivery failure leaves the stored challenge in place.
        """
        code = self._code_factory()
        expires_at = self._clock() + self._ttl
        challenge = await self._store.put_challenge(email, code, expires_at)

        try:
            delivered = await self._notifier.send_otp(email, code)
        except Exception:
            logger.exception("Notifier raised while sending OTP to %s", email)
            delivered = False

        if delivered:
            logger.info("OTP issued for %s (expires %s)", email, expires_at.isoformat())
        else:
            logger.warning("OTP stored for %s but delivery failed", email)
        return IssuedChallenge(challenge=challenge, delivered=delivered)

    async def verify(self, email: str, code: str) -> bool:
        """Return ``True`` and consume the challenge if *code* is live.

        Nothing is deleted on failure.
        """
        challenge = await self._store.find_challenge(email, code)
        if challenge is None:
            logger.info("OTP verification failed for %s", email)
            return False

        if self._clock() >= as_utc(challenge.expires_at):
            logger.info("OTP verification failed for %s", email)
            return False

        await self._store.delete_challenge(email, code)
        logger.info("OTP verified for %s", email)
        return True
