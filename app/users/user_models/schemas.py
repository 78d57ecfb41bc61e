# app/users/user_models/schemas.py


import re
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.shared.schemas import CamelModel

# Allowed values as constants
ROLES = Literal["doctor", "nurse", "admin"]

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")
RESET_CODE_PATTERN = r"^\d{6}$"


def check_password_strength(v: str) -> str:
    if not PASSWORD_PATTERN.match(v):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return v


class EmailNormalizedModel(CamelModel):
    @field_validator("email", mode="before", check_fields=False)
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ✅ Request schema for registration
class UserRegister(EmailNormalizedModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    role: ROLES = "doctor"

    @field_validator("password")
    def validate_password(cls, v):
        return check_password_strength(v)


# ✅ User login request
class UserLogin(EmailNormalizedModel):
    email: EmailStr
    password: str


# ✅ Response schema for user info
class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: ROLES
    is_active: bool
    created_at: datetime


# ✅ Response schema for user login
class UserLoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ✅ Request schema for forgot password (legacy reset link)
class UserForgotPassword(EmailNormalizedModel):
    email: EmailStr


# ✅ Request schema for reset password (legacy reset link)
class UserResetPassword(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=100)

    @field_validator("new_password")
    def validate_new_password(cls, v):
        return check_password_strength(v)


# ✅ Request schemas for the 6-digit code flow
class RequestResetCode(EmailNormalizedModel):
    email: EmailStr


class VerifyResetCode(EmailNormalizedModel):
    email: EmailStr
    code: str = Field(..., min_length=6, max_length=6, pattern=RESET_CODE_PATTERN)


class ResetPasswordWithCode(VerifyResetCode):
    new_password: str = Field(..., min_length=8, max_length=100)


class VerifyResetCodeResponse(BaseModel):
    valid: bool
    message: str


# ✅ Request schema for account deactivation
class DeactivateAccount(CamelModel):
    password: str = Field(..., min_length=1)
    reason: Optional[str] = Field(None, max_length=500)


class DeactivateAccountResponse(CamelModel):
    message: str
    deactivated_at: datetime
