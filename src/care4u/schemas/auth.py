"""Request and response models for the auth endpoints."""

from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

Gender = Literal["male", "female", "other"]
DietaryPreference = Literal["veg", "non-veg"]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# ── Requests ─────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr


class ResendOTPRequest(BaseModel):
    email: EmailStr


class VerifyOTPRequest(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$", description="6-digit code from the email")


class CompleteProfileRequest(BaseModel):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    contact_number: NonEmptyStr
    birth_date: date
    gender: Gender
    height: int = Field(description="Height in centimetres")
    weight: int = Field(description="Weight in kilograms")
    emergency_contact_name: NonEmptyStr
    emergency_contact_number: NonEmptyStr
    dietary_preference: DietaryPreference
    calorie_intake_goal: int
    calorie_burn_goal: int


class UpdateProfileRequest(BaseModel):
    first_name: NonEmptyStr | None = None
    last_name: NonEmptyStr | None = None
    contact_number: NonEmptyStr | None = None
    birth_date: date | None = None
    gender: Gender | None = None
    height: int | None = None
    weight: int | None = None
    emergency_contact_name: NonEmptyStr | None = None
    emergency_contact_number: NonEmptyStr | None = None
    dietary_preference: DietaryPreference | None = None
    calorie_intake_goal: int | None = None
    calorie_burn_goal: int | None = None


# ── Responses ────────────────────────────────────────────

class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    contact_number: str | None = None
    birth_date: date | None = None
    gender: str | None = None
    height: int | None = None
    weight: int | None = None
    bmi: float | None = None
    emergency_contact_name: str | None = None
    emergency_contact_number: str | None = None
    dietary_preference: str | None = None
    calorie_intake_goal: int | None = None
    calorie_burn_goal: int | None = None
    is_profile_complete: bool = False


class OTPResponse(BaseModel):
    success: bool
    message: str
    userId: int | None = None


class LoginUser(BaseModel):
    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    isProfileComplete: bool


class VerifyOTPResponse(BaseModel):
    success: bool
    message: str
    token: str
    user: LoginUser
    isNewUser: bool
    redirectTo: str


class ProfileUser(BaseModel):
    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    is_profile_complete: bool


class CreateProfileResponse(BaseModel):
    success: bool
    message: str
    token: str
    user: ProfileUser
    profile: ProfileOut


class ProfileResponse(BaseModel):
    success: bool
    message: str
    profile: ProfileOut


class AuthUser(BaseModel):
    id: int
    email: str


class CheckAuthResponse(BaseModel):
    success: bool
    message: str
    user: AuthUser
    hasProfile: bool


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
