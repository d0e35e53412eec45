"""Identity store — data access layer for users and OTP challenges."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from care4u.models.otp import OTPChallenge
from care4u.models.user import PROFILE_FIELDS, User, is_profile_complete

# Extra columns the store itself maintains alongside client-supplied fields.
_WRITABLE_FIELDS = frozenset(PROFILE_FIELDS) | {"bmi"}


class UserMissingError(Exception):
    """Raised when a write targets a user row that no longer exists."""


class IdentityStore:
    """Encapsulates all database queries the auth flow needs.

    Every public method commits its own transaction, so each call is
    atomic on its own. Callers never hold a transaction open across calls.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ── Users ────────────────────────────────────────────

    async def find_user_by_email(self, email: str) -> User | None:
        """Look up a user by email (exact, case-sensitive match)."""
        stmt = select(User).where(User.email == email)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(self, email: str) -> User:
        """Insert an email-only user and return it with its new id.

        Callers check :meth:`find_user_by_email` first; a duplicate email
        fails on the unique constraint.
        """
        user = User(email=email)
        self._session.add(user)
        await self._session.commit()
        await self._session.refresh(user)
        return user

    async def get_profile(self, user_id: int) -> User | None:
        """Return the user row (which carries the profile) for *user_id*."""
        return await self._session.get(User, user_id, populate_existing=True)

    async def upsert_profile(self, user_id: int, fields: dict[str, Any]) -> User:
        """Write the supplied profile *fields* onto the user row.

        Only known profile columns are written; anything else (``id``,
        ``email``, ``created_at`` …) is ignored. The cached completeness
        flag is refreshed from the resulting row.
        """
        user = await self._session.get(User, user_id)
        if user is None:
            raise UserMissingError(f"user {user_id} does not exist")

        for key, value in fields.items():
            if key in _WRITABLE_FIELDS:
                setattr(user, key, value)
        user.is_profile_complete = is_profile_complete(user)
        user.updated_at = datetime.now(UTC)

        await self._session.commit()
        await self._session.refresh(user)
        return user

    # ── OTP challenges ───────────────────────────────────

    async def put_challenge(
        self, email: str, code: str, expires_at: datetime
    ) -> OTPChallenge:
        """Replace any challenge for *email* with a new one.

        The delete and the insert are committed together.
        """
        await self._session.execute(
            delete(OTPChallenge).where(OTPChallenge.email == email)
        )
        challenge = OTPChallenge(email=email, otp=code, expires_at=expires_at)
        self._session.add(challenge)
        await self._session.commit()
        await self._session.refresh(challenge)
        return challenge

    async def find_challenge(self, email: str, code: str) -> OTPChallenge | None:
        """Return the challenge for *email* if it carries *code*.

        Only the most recently created challenge for the email is
        considered; an older row left behind by a concurrent issuance
        never matches.
        """
        stmt = (
            select(OTPChallenge)
            .where(OTPChallenge.email == email)
            .order_by(OTPChallenge.created_at.desc(), OTPChallenge.id.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        challenge = result.scalar_one_or_none()
        if challenge is None or challenge.otp != code:
            return None
        return challenge

    async def delete_challenge(self, email: str, code: str) -> None:
        """Delete the challenge(s) for *email* carrying *code*."""
        await self._session.execute(
            delete(OTPChallenge).where(
                OTPChallenge.email == email, OTPChallenge.otp == code
            )
        )
        await self._session.commit()

    async def rollback(self) -> None:
        """Discard whatever the failed call left pending on the session."""
        await self._session.rollback()

    async def purge_expired_challenges(self, now: datetime) -> int:
        """Delete every challenge that expired at or before *now*."""
        result = await self._session.execute(
            delete(OTPChallenge).where(OTPChallenge.expires_at <= now)
        )
        await self._session.commit()
        return result.rowcount or 0
