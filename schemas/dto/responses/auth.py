"""
Response DTOs for authentication endpoints.

UserResponse       - public user shape (never carries the password hash)
LoginResponse      - POST /auth/login  (200)
TokenPairResponse  - POST /auth/refresh  (200)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.models.user import Categorie, Role, UserDoc


class UserResponse(BaseModel):
    """User as returned by login and GET /auth/me."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    pseudo: str
    categorie: Categorie
    role: Role
    email_verified: bool = Field(alias="emailVerified")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @classmethod
    def from_doc(cls, user: UserDoc) -> "UserResponse":
        return cls(
            id=str(user.id),
            email=user.email,
            pseudo=user.pseudo,
            categorie=user.categorie,
            role=user.role,
            email_verified=user.email_verified,
            created_at=user.created_at,
        )


class LoginResponse(BaseModel):
    """Response body for POST /auth/login (200)."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")
    user: UserResponse


class TokenPairResponse(BaseModel):
    """Response body for POST /auth/refresh (200)."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    refresh_token: str = Field(alias="refreshToken")
