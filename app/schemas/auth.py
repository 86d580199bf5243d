import re
from pydantic import EmailStr, Field, field_validator
from typing import Optional
from app.schemas.base import CamelModel

_ASCII_LETTER = re.compile(r"[A-Za-z]")
_ASCII_DIGIT = re.compile(r"[0-9]")


def _check_password_strength(value: str) -> str:
    if not _ASCII_LETTER.search(value) or not _ASCII_DIGIT.search(value):
        raise ValueError("Password must contain at least 1 letter and 1 number")
    return value


class RegisterStartRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=64)
    name: str = Field(..., min_length=2, max_length=60)
    phone: str = Field(..., min_length=9, max_length=16, pattern=r"^\+?[0-9]{9,15}$")

    check_password_strength = field_validator("password")(_check_password_strength)


class RegisterVerifyRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=6, pattern=r"^[0-9]{4,6}$")


class ResendOtpRequest(CamelModel):
    email: EmailStr


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=64)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    email: EmailStr
    token: str = Field(..., min_length=64, max_length=64, pattern=r"^[0-9a-fA-F]+$")
    password: str = Field(..., min_length=8, max_length=64)

    check_password_strength = field_validator("password")(_check_password_strength)


class PendingUserResponse(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None


class UserSummaryResponse(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    created_at: Optional[str] = None


class RegisterStartResponse(CamelModel):
    user: PendingUserResponse
    otp_sent: bool


class ResendOtpResponse(CamelModel):
    otp_sent: bool
    message: Optional[str] = None


class AuthTokenResponse(CamelModel):
    user: UserSummaryResponse
    access_token: str


class RegisterVerifyResponse(AuthTokenResponse):
    verified: bool


class ForgotPasswordResponse(CamelModel):
    requested: bool


class ResetPasswordResponse(CamelModel):
    reset: bool


class CurrentUserResponse(CamelModel):
    user_id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    is_email_verified: bool


class MeResponse(CamelModel):
    user: CurrentUserResponse
