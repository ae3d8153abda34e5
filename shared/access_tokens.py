"""
Bearer credential (JWT access token) encoding and decoding.

RS256 is used when both keys are configured, HS256 with ``JWT_SECRET``
otherwise. Claims carry the user id (``sub``), email and role.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt

from config import JWTSettings
from schemas.models.user import UserDoc


def _algorithm(settings: JWTSettings) -> str:
    return "RS256" if settings.use_rs256 else "HS256"


def _signing_key(settings: JWTSettings) -> str:
    if settings.use_rs256:
        # Support keys provided via env with literal \n sequences
        return settings.jwt_private_key.replace("\\n", "\n")
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
    return settings.jwt_secret


def _verification_key(settings: JWTSettings) -> str:
    if settings.use_rs256:
        return settings.jwt_public_key.replace("\\n", "\n")
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set when RS256 keys are not provided")
    return settings.jwt_secret


def generate_access_jwt(
    user: UserDoc, settings: JWTSettings, now: Optional[datetime] = None
) -> str:
    """Sign an access credential for *user* valid for the configured TTL."""
    now = now or datetime.now(timezone.utc)
    claims = {
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.access_token_ttl_seconds)).timestamp()),
    }
    return jwt.encode(claims, _signing_key(settings), algorithm=_algorithm(settings))


def verify_access_jwt(token: str, settings: JWTSettings) -> dict[str, Any]:
    """Decode and verify *token*.

    Raises:
        jwt.InvalidTokenError: (or a subclass such as ExpiredSignatureError)
            when the signature, issuer, audience or expiry does not check out.
    """
    return jwt.decode(
        token,
        _verification_key(settings),
        algorithms=[_algorithm(settings)],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        options={"require": ["exp", "sub"]},
    )
