"""Repository protocols: services depend on these, not on MongoDB."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from bson import ObjectId

from schemas.models.question import QuestionDoc, QuestionType
from schemas.models.token import TokenDoc
from schemas.models.user import Categorie, UserDoc


@dataclass(frozen=True)
class QuestionFilter:
    """Catalog filter; theme is a case-insensitive substring match."""

    theme: Optional[str] = None
    level: Optional[Categorie] = None
    difficulty: Optional[int] = None
    type: Optional[QuestionType] = None


class UserRepository(Protocol):
    async def find_by_id(self, user_id: ObjectId) -> Optional[UserDoc]: ...

    async def find_by_email(self, email: str) -> Optional[UserDoc]: ...

    async def find_by_pseudo(self, pseudo: str) -> Optional[UserDoc]: ...

    async def insert(self, user: UserDoc) -> UserDoc: ...

    async def set_password_hash(self, user_id: ObjectId, password_hash: str) -> None: ...

    async def mark_email_verified(self, user_id: ObjectId) -> Optional[UserDoc]: ...


class QuestionRepository(Protocol):
    async def insert(self, question: QuestionDoc) -> QuestionDoc: ...

    async def find_by_id(self, question_id: ObjectId) -> Optional[QuestionDoc]: ...

    async def find_page(
        self, filters: QuestionFilter, skip: int, limit: int
    ) -> list[QuestionDoc]: ...

    async def count(self, filters: Optional[QuestionFilter] = None) -> int: ...

    async def replace(self, question: QuestionDoc) -> Optional[QuestionDoc]: ...

    async def delete(self, question_id: ObjectId) -> bool: ...

    async def distinct_themes(self) -> list[str]: ...

    async def count_by(self, field: str) -> dict[Any, int]: ...


class TokenRepository(Protocol):
    async def insert(self, token: TokenDoc) -> TokenDoc: ...

    async def find_by_token(self, token: str) -> Optional[TokenDoc]: ...

    async def delete_by_token(self, token: str) -> None: ...

    async def delete_for_user(self, user_id: ObjectId) -> int: ...
