"""Auth router — OTP login, profile completion and session checks.

Endpoints
---------
POST /api/auth/login              → email a one-time code
POST /api/auth/verify-otp         → exchange the code for a session token
POST /api/auth/resend-otp         → email a replacement code
POST /api/auth/profile            → complete the profile (bearer)
POST /api/auth/complete-profile   → alias of the above
GET  /api/auth/profile            → read the profile (bearer)
GET  /api/auth/user               → alias of the above
PUT  /api/auth/profile            → partially update the profile (bearer)
PUT  /api/auth/update-profile     → alias of the above
GET  /api/auth/check              → identity + live profile completeness
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from care4u.api.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_current_claims,
)
from care4u.schemas.auth import (
    AuthUser,
    CheckAuthResponse,
    CompleteProfileRequest,
    CreateProfileResponse,
    ErrorResponse,
    LoginRequest,
    LoginUser,
    OTPResponse,
    ProfileOut,
    ProfileResponse,
    ProfileUser,
    ResendOTPRequest,
    UpdateProfileRequest,
    VerifyOTPRequest,
    VerifyOTPResponse,
)
from care4u.services.auth_service import AuthService
from care4u.services.result import Err, ErrorKind
from care4u.services.token_issuer import TokenClaims

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

_STATUS_BY_KIND = {
    ErrorKind.USER_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OR_EXPIRED_OTP: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PROFILE_ALREADY_COMPLETE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PROFILE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.DELIVERY_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.STORAGE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(err: Err) -> JSONResponse:
    logger.info("Auth request rejected: %s", err.kind)
    return JSONResponse(
        status_code=_STATUS_BY_KIND[err.kind],
        content=ErrorResponse(message=err.message).model_dump(),
    )


# ── Login ────────────────────────────────────────────────

@router.post("/login", response_model=OTPResponse)
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """Email a one-time code, registering the address on first use."""
    result = await service.send_otp(body.email)
    if isinstance(result, Err):
        return _error_response(result)
    return OTPResponse(success=True, message="OTP sent successfully", userId=result.value.user_id)


@router.post("/resend-otp", response_model=OTPResponse)
async def resend_otp(body: ResendOTPRequest, service: AuthService = Depends(get_auth_service)):
    result = await service.resend_otp(body.email)
    if isinstance(result, Err):
        return _error_response(result)
    return OTPResponse(success=True, message="OTP sent successfully", userId=result.value.user_id)


@router.post("/verify-otp", response_model=VerifyOTPResponse)
async def verify_otp(body: VerifyOTPRequest, service: AuthService = Depends(get_auth_service)):
    """Exchange a code for a temporary or permanent session token."""
    result = await service.verify_otp(body.email, body.otp)
    if isinstance(result, Err):
        return _error_response(result)

    login_result = result.value
    user = login_result.user
    if login_result.profile_complete:
        login_user = LoginUser(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            isProfileComplete=True,
        )
    else:
        login_user = LoginUser(id=user.id, email=user.email, isProfileComplete=False)

    return VerifyOTPResponse(
        success=True,
        message=login_result.message,
        token=login_result.token.token,
        user=login_user,
        isNewUser=login_result.is_new_user,
        redirectTo=login_result.redirect_to,
    )


# ── Profile ──────────────────────────────────────────────

@router.post("/profile", response_model=CreateProfileResponse)
@router.post("/complete-profile", response_model=CreateProfileResponse)
async def create_profile(
    body: CompleteProfileRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    result = await service.create_profile(claims.user_id, body.model_dump())
    if isinstance(result, Err):
        return _error_response(result)

    profile = result.value.profile
    return CreateProfileResponse(
        success=True,
        message="Profile created successfully",
        token=result.value.token.token,
        user=ProfileUser(
            id=profile.id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            is_profile_complete=True,
        ),
        profile=ProfileOut.model_validate(profile),
    )


@router.get("/profile", response_model=ProfileResponse)
@router.get("/user", response_model=ProfileResponse)
async def get_profile(
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    result = await service.get_profile(claims.user_id)
    if isinstance(result, Err):
        return _error_response(result)
    return ProfileResponse(
        success=True,
        message="Profile retrieved successfully",
        profile=ProfileOut.model_validate(result.value),
    )


@router.put("/profile", response_model=ProfileResponse)
@router.put("/update-profile", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    claims: TokenClaims = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    """Apply only the fields present in the request body."""
    result = await service.update_profile(claims.user_id, body.model_dump(exclude_unset=True))
    if isinstance(result, Err):
        return _error_response(result)
    return ProfileResponse(
        success=True,
        message="Profile updated successfully",
        profile=ProfileOut.model_validate(result.value),
    )


# ── Session ──────────────────────────────────────────────

@router.get("/check", response_model=CheckAuthResponse)
async def check_auth(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    """Report identity and live profile completeness for the bearer token.

    ``hasProfile`` turning true while the caller still holds a temporary
    token is the client's cue to log in again for a permanent one.
    """
    result = await service.check_auth(token)
    if isinstance(result, Err):
        return _error_response(result)
    auth_status = result.value
    return CheckAuthResponse(
        success=True,
        message="User is authenticated",
        user=AuthUser(id=auth_status.user_id, email=auth_status.email),
        hasProfile=auth_status.has_profile,
    )
