"""Session tokens — mints and validates the two classes of bearer JWT."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

import jwt

from care4u.config import Settings, settings
from care4u.models.user import User
from care4u.services.otp_manager import utcnow
from care4u.services.result import InvalidTokenError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


@dataclass(frozen=True)
class SessionToken:
    token: str
    kind: TokenKind
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str


class TokenIssuer:
    """Signs and checks ``{userId, email, exp}`` JWTs.

    Temporary and permanent tokens carry identical claims and differ only
    in lifetime. Whether a user may act as fully onboarded is decided from
    the live profile, never from the token.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        temporary_ttl: timedelta = timedelta(hours=1),
        permanent_ttl: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._lifetimes = {
            TokenKind.TEMPORARY: temporary_ttl,
            TokenKind.PERMANENT: permanent_ttl,
        }
        self._clock = clock

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> TokenIssuer:
        config = config or settings
        return cls(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            temporary_ttl=timedelta(minutes=config.temp_token_expire_minutes),
            permanent_ttl=timedelta(days=config.permanent_token_expire_days),
        )

    def issue_token(self, user: User, complete: bool) -> SessionToken:
        """Mint a permanent token if *complete*, a temporary one otherwise."""
        kind = TokenKind.PERMANENT if complete else TokenKind.TEMPORARY
        expires_at = self._clock() + self._lifetimes[kind]
        payload = {"userId": user.id, "email": user.email, "exp": expires_at}
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        logger.debug("Issued %s token for user %s", kind, user.id)
        return SessionToken(token=token, kind=kind, expires_at=expires_at)

    def validate_token(self, token: str) -> TokenClaims:
        """Return the claims of *token* or raise :class:`InvalidTokenError`.

        The signature is checked by PyJWT; expiry is checked against the
        injected clock so both trust checks share one notion of "now".
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"], "verify_exp": False},
            )
        except jwt.PyJWTError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise InvalidTokenError("Invalid token") from exc

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or self._clock().timestamp() >= exp:
            logger.info("Rejected bearer token: expired")
            raise InvalidTokenError("Invalid token")

        user_id = payload.get("userId")
        email = payload.get("email")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
            logger.info("Rejected bearer token: missing identity claims")
            raise InvalidTokenError("Invalid token")
        return TokenClaims(user_id=user_id, email=email)
