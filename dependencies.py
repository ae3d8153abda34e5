"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain async functions
used with FastAPI's Depends() system. Services are built once in the app
lifespan and read back from app.state.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request

from errors import AuthenticationError
from schemas.models.user import UserDoc
from services.auth_service import AuthService
from services.question_service import QuestionService

BEARER_PREFIX = "Bearer "


async def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


async def get_question_service(request: Request) -> QuestionService:
    return request.app.state.question_service


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        return token or None
    return None


async def get_current_user(
    request: Request,
    auth: AuthService = Depends(get_auth_service),
) -> UserDoc:
    """Resolve the bearer credential into a user, or raise 401."""
    token = _bearer_token(request)
    if token is None:
        raise AuthenticationError("Authentication required")
    return await auth.authenticate(token)
