"""
Request DTOs for authentication endpoints.

RegisterRequest               - POST /auth/register
LoginRequest                  - POST /auth/login
RequestPasswordResetRequest   - POST /auth/request-password-reset
ResetPasswordRequest          - POST /auth/reset-password
RefreshRequest                - POST /auth/refresh
LogoutRequest                 - POST /auth/logout
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from schemas.models.user import Categorie
from shared.validators import (
    PASSWORD_MAX_LENGTH,
    PSEUDO_MAX_LENGTH,
    PSEUDO_MIN_LENGTH,
    PSEUDO_PATTERN,
)


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register.

    Password strength is checked by AuthService so that the error lists every
    unmet requirement.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr = Field(max_length=255)
    pseudo: str = Field(
        min_length=PSEUDO_MIN_LENGTH, max_length=PSEUDO_MAX_LENGTH, pattern=PSEUDO_PATTERN
    )
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)
    categorie: Categorie


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str


class RequestPasswordResetRequest(BaseModel):
    """Request body for POST /auth/request-password-reset."""

    model_config = ConfigDict(populate_by_name=True)

    email: str


class ResetPasswordRequest(BaseModel):
    """Request body for POST /auth/reset-password."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(min_length=1)
    password: str = Field(max_length=PASSWORD_MAX_LENGTH)


class RefreshRequest(BaseModel):
    """Request body for POST /auth/refresh."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken", min_length=1)


class LogoutRequest(BaseModel):
    """Request body for POST /auth/logout.

    ``logoutAll`` revokes every refresh token of the owner, not only this one.
    """

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    logout_all: bool = Field(default=False, alias="logoutAll")
