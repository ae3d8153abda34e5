"""
Opaque token document model.

Each token kind lives in its own collection:
- `email-verification-tokens` - single use, 24 hours
- `password-reset-tokens`     - deleted only after the password changed, 1 hour
- `refresh-tokens`            - at most one live token per user, 7 days

A token is valid only strictly before expires_at.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from schemas.models.base import MongoBaseModel, PyObjectId


class TokenKind(str, Enum):
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"
    REFRESH = "refresh"


TOKEN_TTLS: dict[TokenKind, timedelta] = {
    TokenKind.EMAIL_VERIFICATION: timedelta(hours=24),
    TokenKind.PASSWORD_RESET: timedelta(hours=1),
    TokenKind.REFRESH: timedelta(days=7),
}

TOKEN_COLLECTIONS: dict[TokenKind, str] = {
    TokenKind.EMAIL_VERIFICATION: "email-verification-tokens",
    TokenKind.PASSWORD_RESET: "password-reset-tokens",
    TokenKind.REFRESH: "refresh-tokens",
}


class TokenDoc(MongoBaseModel):
    """Document model shared by the three token collections."""

    token: str
    user_id: PyObjectId
    expires_at: datetime
    created_at: Optional[datetime] = None
