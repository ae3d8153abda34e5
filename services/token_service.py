"""
Opaque token lifecycle: email verification, password reset and refresh tokens.

One TokenService per kind, each bound to its own repository. The kinds differ
only in what consume() and issue() do around the shared lookup:

- verification: consume() marks the email verified and deletes the token
- reset:        consume() leaves the token in place; callers revoke it once
                the password actually changed
- refresh:      issue() first deletes the user's other refresh tokens, so at
                most one is live per user

The refresh delete-then-insert is not transactional: two concurrent logins for
the same user can both end up holding a live token.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from bson import ObjectId

from repositories.protocols import TokenRepository, UserRepository
from schemas.models.token import TOKEN_TTLS, TokenDoc, TokenKind
from schemas.models.user import UserDoc
from shared.datetime_utils import Clock, is_expired, utcnow
from shared.generators import generate_secure_token
from shared.logging import get_logger

log = get_logger(__name__)


class TokenService:
    kind: TokenKind = TokenKind.PASSWORD_RESET

    def __init__(
        self,
        tokens: TokenRepository,
        users: UserRepository,
        clock: Clock = utcnow,
    ) -> None:
        self._tokens = tokens
        self._users = users
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return TOKEN_TTLS[self.kind]

    async def issue(self, user: UserDoc) -> str:
        """Create, store and return a fresh token for *user*."""
        now = self._clock()
        doc = TokenDoc(
            token=generate_secure_token(),
            user_id=user.id,
            expires_at=now + self.ttl,
            created_at=now,
        )
        await self._tokens.insert(doc)
        log.info("token_issued", kind=self.kind.value, user_id=str(user.id))
        return doc.token

    async def _lookup(self, token: str) -> Optional[tuple[TokenDoc, UserDoc]]:
        doc = await self._tokens.find_by_token(token)
        if doc is None:
            log.info("token_not_found", kind=self.kind.value)
            return None
        if is_expired(doc.expires_at, self._clock()):
            log.info("token_expired", kind=self.kind.value, user_id=str(doc.user_id))
            return None
        user = await self._users.find_by_id(doc.user_id)
        if user is None:
            log.warning("token_owner_missing", kind=self.kind.value, user_id=str(doc.user_id))
            return None
        return doc, user

    async def consume(self, token: str) -> Optional[UserDoc]:
        """Return the owner of a live token, or None if absent or expired."""
        found = await self._lookup(token)
        return found[1] if found else None

    async def revoke(self, token: str) -> None:
        await self._tokens.delete_by_token(token)

    async def revoke_all_for_user(self, user_id: ObjectId) -> int:
        deleted = await self._tokens.delete_for_user(user_id)
        log.info("tokens_revoked", kind=self.kind.value, user_id=str(user_id), count=deleted)
        return deleted


class PasswordResetTokenService(TokenService):
    kind = TokenKind.PASSWORD_RESET


class VerificationTokenService(TokenService):
    kind = TokenKind.EMAIL_VERIFICATION

    async def consume(self, token: str) -> Optional[UserDoc]:
        found = await self._lookup(token)
        if found is None:
            return None
        doc, user = found
        verified = await self._users.mark_email_verified(user.id)
        await self._tokens.delete_by_token(doc.token)
        log.info("email_verified", user_id=str(user.id))
        return verified or user.model_copy(update={"email_verified": True})


class RefreshTokenService(TokenService):
    kind = TokenKind.REFRESH

    async def issue(self, user: UserDoc) -> str:
        await self._tokens.delete_for_user(user.id)
        return await super().issue(user)
