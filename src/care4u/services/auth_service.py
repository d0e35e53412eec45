"""Auth orchestrator — passwordless login and progressive profile completion.

Flow
----
1. ``send_otp`` creates an email-only user on first contact and emails a
   fresh 6-digit code, replacing any earlier one.
2. ``verify_otp`` consumes the code and mints a session token. Users with
   an incomplete profile get a short-lived *temporary* token and are sent
   to profile completion; complete users get a *permanent* token.
3. ``create_profile`` fills in the profile once and upgrades the caller to
   a permanent token.
4. ``check_auth`` reports live profile completeness for a token, which is
   how a client holding a temporary token learns it should log in again.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, ParamSpec

from sqlalchemy.exc import SQLAlchemyError

from care4u.database.repository import IdentityStore, UserMissingError
from care4u.models.user import (
    REQUIRED_PROFILE_FIELDS,
    User,
    has_profile_record,
    is_profile_complete,
)
from care4u.services.otp_manager import OTPManager
from care4u.services.result import Err, ErrorKind, InvalidTokenError, Ok, Result
from care4u.services.token_issuer import SessionToken, TokenIssuer

logger = logging.getLogger(__name__)

P = ParamSpec("P")

REDIRECT_HOME = "home"
REDIRECT_COMPLETE_PROFILE = "complete-profile"

_MEASUREMENTS = ("height", "weight")
_CALORIE_GOALS = ("calorie_intake_goal", "calorie_burn_goal")

_FIELD_LABELS = {
    "height": "Height",
    "weight": "Weight",
    "calorie_intake_goal": "Calorie intake goal",
    "calorie_burn_goal": "Calorie burn goal",
}


# ── Success payloads ─────────────────────────────────────

@dataclass(frozen=True)
class OTPSent:
    user_id: int


@dataclass(frozen=True)
class LoginResult:
    message: str
    token: SessionToken
    user: User
    profile_complete: bool
    is_new_user: bool
    redirect_to: str


@dataclass(frozen=True)
class ProfileCreated:
    token: SessionToken
    profile: User


@dataclass(frozen=True)
class AuthStatus:
    user_id: int
    email: str
    has_profile: bool


def calculate_bmi(height_cm: float, weight_kg: float) -> float:
    """Body-mass index from centimetres and kilograms, to one decimal."""
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 1)


def storage_boundary(
    failure_message: str,
) -> Callable[[Callable[P, Awaitable[Result]]], Callable[P, Awaitable[Result]]]:
    """Turn storage errors raised inside an operation into a generic ``Err``."""

    def decorator(func: Callable[P, Awaitable[Result]]) -> Callable[P, Awaitable[Result]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result:
            try:
                return await func(*args, **kwargs)
            except (SQLAlchemyError, UserMissingError):
                logger.exception("%s failed", func.__name__)
                self = args[0]
                await self._store.rollback()
                return Err(ErrorKind.STORAGE_FAILURE, failure_message)

        return wrapper

    return decorator


class AuthService:
    """Composes the identity store, OTP lifecycle and token issuer.

    All collaborators are injected; the service holds no global state and
    is cheap to build per request.
    """

    def __init__(
        self, store: IdentityStore, otp_manager: OTPManager, token_issuer: TokenIssuer
    ) -> None:
        self._store = store
        self._otp = otp_manager
        self._tokens = token_issuer

    # ── Login ────────────────────────────────────────────

    @storage_boundary("Failed to send OTP")
    async def send_otp(self, email: str) -> Result[OTPSent]:
        """Issue a code for *email*, creating the user on first contact.

        The response is the same for new and returning users.
        """
        user = await self._store.find_user_by_email(email)
        if user is None:
            user = await self._store.create_user(email)
            logger.info("Created user %s for %s", user.id, email)
        return await self._issue(user)

    @storage_boundary("Failed to send OTP")
    async def resend_otp(self, email: str) -> Result[OTPSent]:
        """Issue a replacement code for an existing user."""
        user = await self._store.find_user_by_email(email)
        if user is None:
            return Err(ErrorKind.USER_NOT_FOUND, "User not found")
        return await self._issue(user)

    @storage_boundary("OTP verification failed")
    async def verify_otp(self, email: str, code: str) -> Result[LoginResult]:
        """Consume *code* and mint a token matching the profile's state."""
        user = await self._store.find_user_by_email(email)
        if user is None:
            return Err(ErrorKind.USER_NOT_FOUND, "User not found")

        if not await self._otp.verify(email, code):
            return Err(ErrorKind.INVALID_OR_EXPIRED_OTP, "Invalid or expired OTP")

        if is_profile_complete(user):
            return Ok(
                LoginResult(
                    message="Login successful",
                    token=self._tokens.issue_token(user, complete=True),
                    user=user,
                    profile_complete=True,
                    is_new_user=False,
                    redirect_to=REDIRECT_HOME,
                )
            )

        return Ok(
            LoginResult(
                message="Please complete your profile",
                token=self._tokens.issue_token(user, complete=False),
                user=user,
                profile_complete=False,
                is_new_user=not has_profile_record(user),
                redirect_to=REDIRECT_COMPLETE_PROFILE,
            )
        )

    # ── Profile ──────────────────────────────────────────

    @storage_boundary("Failed to create profile")
    async def create_profile(
        self, user_id: int, profile_data: dict[str, Any]
    ) -> Result[ProfileCreated]:
        """Fill in the profile once and mint a permanent token.

        A profile that is already complete is left untouched.
        """
        existing = await self._store.get_profile(user_id)
        if existing is None:
            return Err(ErrorKind.PROFILE_NOT_FOUND, "Profile not found")
        if is_profile_complete(existing):
            return Err(ErrorKind.PROFILE_ALREADY_COMPLETE, "Profile already exists")

        missing = [f for f in REQUIRED_PROFILE_FIELDS if profile_data.get(f) in (None, "")]
        if missing:
            return Err(
                ErrorKind.VALIDATION_FAILED,
                f"Missing required profile fields: {', '.join(missing)}",
            )

        if _any_non_positive(profile_data, _MEASUREMENTS, required=True):
            return Err(
                ErrorKind.VALIDATION_FAILED, "Height and weight must be positive numbers"
            )
        if _any_non_positive(profile_data, _CALORIE_GOALS, required=True):
            return Err(
                ErrorKind.VALIDATION_FAILED, "Calorie goals must be positive numbers"
            )

        fields = dict(profile_data)
        fields["bmi"] = calculate_bmi(fields["height"], fields["weight"])
        profile = await self._store.upsert_profile(user_id, fields)
        logger.info("Profile completed for user %s", user_id)

        return Ok(
            ProfileCreated(
                token=self._tokens.issue_token(profile, complete=True),
                profile=profile,
            )
        )

    @storage_boundary("Failed to get profile")
    async def get_profile(self, user_id: int) -> Result[User]:
        profile = await self._store.get_profile(user_id)
        if profile is None:
            return Err(ErrorKind.PROFILE_NOT_FOUND, "Profile not found")
        return Ok(profile)

    @storage_boundary("Failed to update profile")
    async def update_profile(
        self, user_id: int, partial_data: dict[str, Any]
    ) -> Result[User]:
        """Merge the supplied fields into an existing profile.

        No token is minted. BMI is recomputed only when height and weight
        arrive together in the same call; updating just one of them leaves
        the stored BMI as it was.
        """
        existing = await self._store.get_profile(user_id)
        if existing is None:
            return Err(ErrorKind.PROFILE_NOT_FOUND, "Profile not found")

        for field in _MEASUREMENTS + _CALORIE_GOALS:
            if _any_non_positive(partial_data, (field,), required=False):
                return Err(
                    ErrorKind.VALIDATION_FAILED,
                    f"{_FIELD_LABELS[field]} must be a positive number",
                )

        fields = {k: v for k, v in partial_data.items() if v is not None}
        if "height" in fields and "weight" in fields:
            fields["bmi"] = calculate_bmi(fields["height"], fields["weight"])

        profile = await self._store.upsert_profile(user_id, fields)
        logger.info("Profile updated for user %s (%s)", user_id, ", ".join(sorted(fields)))
        return Ok(profile)

    # ── Session ──────────────────────────────────────────

    @storage_boundary("Failed to check authentication")
    async def check_auth(self, token: str) -> Result[AuthStatus]:
        """Validate *token* and report the user's current completeness."""
        try:
            claims = self._tokens.validate_token(token)
        except InvalidTokenError:
            return Err(ErrorKind.INVALID_TOKEN, "Invalid token")

        profile = await self._store.get_profile(claims.user_id)
        if profile is None:
            return Err(ErrorKind.USER_NOT_FOUND, "User not found")

        return Ok(
            AuthStatus(
                user_id=claims.user_id,
                email=claims.email,
                has_profile=is_profile_complete(profile),
            )
        )

    # ── Private helpers ──────────────────────────────────

    async def _issue(self, user: User) -> Result[OTPSent]:
        issued = await self._otp.issue(user.email)
        if not issued.delivered:
            return Err(
                ErrorKind.DELIVERY_FAILED,
                "We could not send the verification email. Please request a new code.",
            )
        return Ok(OTPSent(user_id=user.id))


def _any_non_positive(data: dict[str, Any], fields: tuple[str, ...], required: bool) -> bool:
    for field in fields:
        value = data.get(field)
        if value is None:
            if required:
                return True
            continue
        if value <= 0:
            return True
    return False
