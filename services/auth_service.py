"""
Auth orchestration: register, login, email verification, password reset,
refresh rotation and logout.

Security-sensitive answers are deliberately uniform:
- login fails with the same message for an unknown email and a wrong password
- a password reset request always gets the same reply

Email delivery is best effort. A failed send is logged and never undoes the
work already done (the account exists, the token is stored).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import jwt

from config import JWTSettings
from errors import AuthenticationError, ConflictError, EmailDeliveryError, ValidationError
from infrastructure.email.protocol import EmailProvider
from repositories.protocols import UserRepository
from schemas.models.base import parse_object_id
from schemas.models.user import Categorie, Role, UserDoc
from services.token_service import (
    PasswordResetTokenService,
    RefreshTokenService,
    VerificationTokenService,
)
from shared.access_tokens import generate_access_jwt, verify_access_jwt
from shared.crypto import (
    DEFAULT_PASSWORD_HASH_COST,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from shared.datetime_utils import Clock, utcnow
from shared.logging import get_logger, log_with_context
from shared.validators import validate_password, validate_pseudo

log = get_logger(__name__)

REGISTERED_MESSAGE = "Registration successful. Check your email to verify your account."
EMAIL_VERIFIED_MESSAGE = "Email verified successfully"
RESET_REQUESTED_MESSAGE = "If an account exists for this email, a reset link has been sent."
PASSWORD_RESET_MESSAGE = "Password reset successfully"
LOGGED_OUT_MESSAGE = "Logged out successfully"

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    user: UserDoc


def strip_password_hash(user: UserDoc) -> UserDoc:
    """Return a copy of *user* that no longer carries its password digest."""
    return user.model_copy(update={"password_hash": ""})


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(
        self,
        users: UserRepository,
        verification_tokens: VerificationTokenService,
        reset_tokens: PasswordResetTokenService,
        refresh_tokens: RefreshTokenService,
        email_provider: EmailProvider,
        jwt_settings: JWTSettings,
        password_hash_cost: int = DEFAULT_PASSWORD_HASH_COST,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._verification_tokens = verification_tokens
        self._reset_tokens = reset_tokens
        self._refresh_tokens = refresh_tokens
        self._email = email_provider
        self._jwt = jwt_settings
        self._cost = password_hash_cost
        self._clock = clock

    async def _hash(self, password: str) -> str:
        # argon2 is CPU bound; keep it off the event loop
        return await asyncio.to_thread(hash_password, password, self._cost)

    @staticmethod
    def _check_password_policy(password: str) -> None:
        missing = validate_password(password)
        if missing:
            raise ValidationError(
                "Password does not meet requirements",
                field="password",
                details=missing,
            )

    def _access_token(self, user: UserDoc) -> str:
        return generate_access_jwt(user, self._jwt, now=self._clock())

    async def register(
        self, email: str, pseudo: str, password: str, categorie: Categorie
    ) -> str:
        email = _normalize_email(email)
        pseudo = pseudo.strip()
        if not validate_pseudo(pseudo):
            raise ValidationError(
                "Pseudo must be 3-30 letters, digits, '_' or '-'", field="pseudo"
            )
        self._check_password_policy(password)

        if await self._users.find_by_email(email):
            raise ConflictError("Email already in use", field="email")
        if await self._users.find_by_pseudo(pseudo):
            raise ConflictError("Pseudo already in use", field="pseudo")

        user = await self._users.insert(
            UserDoc(
                email=email,
                pseudo=pseudo,
                password_hash=await self._hash(password),
                categorie=categorie,
                role=Role.PARTICIPANT,
                email_verified=False,
                created_at=self._clock(),
            )
        )
        ulog = log_with_context(log, user_id=str(user.id))
        ulog.info("user_registered", categorie=user.categorie.value)

        token = await self._verification_tokens.issue(user)
        try:
            await self._email.send_verification_email(user, token)
        except EmailDeliveryError as e:
            ulog.warning("verification_email_failed", error=str(e))

        return REGISTERED_MESSAGE

    async def login(self, email: str, password: str) -> LoginResult:
        user = await self._users.find_by_email(_normalize_email(email))
        digest = user.password_hash if user else dummy_password_hash(self._cost)
        matches = await asyncio.to_thread(verify_password, password, digest)
        if user is None or not matches:
            log.info("login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        refresh_token = await self._refresh_tokens.issue(user)
        log.info("login_success", user_id=str(user.id))
        return LoginResult(
            access_token=self._access_token(user),
            refresh_token=refresh_token,
            user=strip_password_hash(user),
        )

    async def validate_credential(self, claims: dict[str, Any]) -> Optional[UserDoc]:
        """Turn verified JWT claims into the current user, or None."""
        user_id = parse_object_id(claims.get("sub"))
        if user_id is None:
            return None
        user = await self._users.find_by_id(user_id)
        if user is None:
            return None
        return strip_password_hash(user)

    async def authenticate(self, bearer_token: str) -> UserDoc:
        try:
            claims = verify_access_jwt(bearer_token, self._jwt)
        except jwt.InvalidTokenError as e:
            log.info("access_token_rejected", error_type=type(e).__name__)
            raise AuthenticationError("Invalid or expired access token") from e

        user = await self.validate_credential(claims)
        if user is None:
            raise AuthenticationError("Invalid or expired access token")
        return user

    async def verify_email(self, token: str) -> str:
        user = await self._verification_tokens.consume(token)
        if user is None:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)
        return EMAIL_VERIFIED_MESSAGE

    async def request_password_reset(self, email: str) -> str:
        user = await self._users.find_by_email(_normalize_email(email))
        if user is None:
            log.info("password_reset_unknown_email")
            return RESET_REQUESTED_MESSAGE

        token = await self._reset_tokens.issue(user)
        try:
            await self._email.send_password_reset_email(user, token)
        except EmailDeliveryError as e:
            log.warning("password_reset_email_failed", user_id=str(user.id), error=str(e))

        return RESET_REQUESTED_MESSAGE

    async def reset_password(self, token: str, new_password: str) -> str:
        user = await self._reset_tokens.consume(token)
        if user is None:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        # The token stays valid until the new password is actually stored
        self._check_password_policy(new_password)
        await self._users.set_password_hash(user.id, await self._hash(new_password))
        await self._reset_tokens.revoke(token)

        log.info("password_reset_success", user_id=str(user.id))
        return PASSWORD_RESET_MESSAGE

    async def refresh(self, refresh_token: str) -> TokenPair:
        user = await self._refresh_tokens.consume(refresh_token)
        if user is None:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        return TokenPair(
            access_token=self._access_token(user),
            refresh_token=await self._refresh_tokens.issue(user),
        )

    async def logout(self, refresh_token: Optional[str], logout_all: bool = False) -> str:
        if not refresh_token:
            return LOGGED_OUT_MESSAGE

        if logout_all:
            user = await self._refresh_tokens.consume(refresh_token)
            if user is not None:
                await self._refresh_tokens.revoke_all_for_user(user.id)
                log.info("logout_all", user_id=str(user.id))
                return LOGGED_OUT_MESSAGE

        await self._refresh_tokens.revoke(refresh_token)
        return LOGGED_OUT_MESSAGE
