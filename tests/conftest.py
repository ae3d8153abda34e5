"""
Shared test fixtures.

In-memory stand-ins for the repositories and the email provider, plus a
controllable clock. They follow the protocols in repositories.protocols and
infrastructure.email.protocol so services can be exercised without MongoDB
or SMTP.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest
from bson import ObjectId

# AppSettings requires a MONGODB_URI; nothing ever connects to it in tests
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")

from config import JWTSettings  # noqa: E402
from errors import ConflictError, EmailDeliveryError  # noqa: E402
from repositories.protocols import QuestionFilter  # noqa: E402
from schemas.models.question import QuestionDoc, QuestionType  # noqa: E402
from schemas.models.token import TokenDoc  # noqa: E402
from schemas.models.user import Categorie, Role, UserDoc  # noqa: E402
from services.auth_service import AuthService  # noqa: E402
from services.question_service import QuestionService  # noqa: E402
from services.token_service import (  # noqa: E402
    PasswordResetTokenService,
    RefreshTokenService,
    VerificationTokenService,
)
from shared.crypto import hash_password  # noqa: E402

TEST_JWT_SECRET = "test-secret-that-is-long-enough-for-hs256-signing"
TEST_PASSWORD = "Secret123"


class FakeClock:
    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or datetime.now(timezone.utc).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryUserRepository:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, UserDoc] = {}

    def add(self, user: UserDoc) -> UserDoc:
        user = user.model_copy(update={"id": user.id or ObjectId()})
        self.docs[user.id] = user
        return user

    async def find_by_id(self, user_id):
        return self.docs.get(user_id)

    async def find_by_email(self, email):
        return next((u for u in self.docs.values() if u.email == email), None)

    async def find_by_pseudo(self, pseudo):
        return next((u for u in self.docs.values() if u.pseudo == pseudo), None)

    async def insert(self, user):
        if await self.find_by_email(user.email) or await self.find_by_pseudo(user.pseudo):
            raise ConflictError("Email or pseudo already in use")
        return self.add(user)

    async def set_password_hash(self, user_id, password_hash):
        self.docs[user_id] = self.docs[user_id].model_copy(
            update={"password_hash": password_hash}
        )

    async def mark_email_verified(self, user_id):
        if user_id not in self.docs:
            return None
        self.docs[user_id] = self.docs[user_id].model_copy(update={"email_verified": True})
        return self.docs[user_id]


class InMemoryTokenRepository:
    def __init__(self) -> None:
        self.docs: list[TokenDoc] = []

    async def insert(self, token):
        token = token.model_copy(update={"id": ObjectId()})
        self.docs.append(token)
        return token

    async def find_by_token(self, token):
        return next((t for t in self.docs if t.token == token), None)

    async def delete_by_token(self, token):
        self.docs = [t for t in self.docs if t.token != token]

    async def delete_for_user(self, user_id):
        before = len(self.docs)
        self.docs = [t for t in self.docs if t.user_id != user_id]
        return before - len(self.docs)


def _matches(question: QuestionDoc, filters: Optional[QuestionFilter]) -> bool:
    if filters is None:
        return True
    if filters.theme and filters.theme.lower() not in question.theme.lower():
        return False
    if filters.level is not None and question.level != filters.level:
        return False
    if filters.difficulty is not None and question.difficulty != filters.difficulty:
        return False
    if filters.type is not None and question.type != filters.type:
        return False
    return True


class InMemoryQuestionRepository:
    def __init__(self) -> None:
        self.docs: dict[ObjectId, QuestionDoc] = {}

    def add(self, question: QuestionDoc) -> QuestionDoc:
        question = question.model_copy(update={"id": question.id or ObjectId()})
        self.docs[question.id] = question
        return question

    async def insert(self, question):
        return self.add(question)

    async def find_by_id(self, question_id):
        return self.docs.get(question_id)

    async def find_page(self, filters, skip, limit):
        found = sorted(
            (q for q in self.docs.values() if _matches(q, filters)),
            key=lambda q: (q.level.value, q.difficulty, q.theme),
        )
        return found[skip: skip + limit]

    async def count(self, filters=None):
        return sum(1 for q in self.docs.values() if _matches(q, filters))

    async def replace(self, question):
        if question.id not in self.docs:
            return None
        self.docs[question.id] = question
        return question

    async def delete(self, question_id):
        return self.docs.pop(question_id, None) is not None

    async def distinct_themes(self):
        return sorted({q.theme for q in self.docs.values()})

    async def count_by(self, field):
        counts: dict[Any, int] = {}
        for q in self.docs.values():
            value = getattr(q, field)
            counts[value] = counts.get(value, 0) + 1
        return counts


class RecordingEmailProvider:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    async def _record(self, kind: str, user: UserDoc, token: str) -> None:
        if self.fail:
            raise EmailDeliveryError("smtp down")
        self.sent.append((kind, user.email, token))

    async def send_verification_email(self, user, token):
        await self._record("verification", user, token)

    async def send_password_reset_email(self, user, token):
        await self._record("password_reset", user, token)

    def last_token(self, kind: str) -> str:
        return [t for k, _, t in self.sent if k == kind][-1]


def make_user(**overrides) -> UserDoc:
    data = {
        "email": "ada@example.com",
        "pseudo": "ada",
        "password_hash": hash_password(TEST_PASSWORD, cost=1),
        "categorie": Categorie.PREPA,
        "role": Role.PARTICIPANT,
        "email_verified": False,
    }
    data.update(overrides)
    return UserDoc(**data)


def make_question(**overrides) -> QuestionDoc:
    data = {
        "statement": "Approximate pi to two decimals",
        "solution": "3.14",
        "type": QuestionType.NUMERIQUE,
        "theme": "Analyse",
        "level": Categorie.LYCEE,
        "difficulty": 2,
        "tolerance": 0.02,
    }
    data.update(overrides)
    return QuestionDoc(**data)


@pytest.fixture
def user_factory():
    return make_user


@pytest.fixture
def question_factory():
    return make_question


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def question_repo():
    return InMemoryQuestionRepository()


@pytest.fixture
def email_provider():
    return RecordingEmailProvider()


@pytest.fixture
def jwt_settings():
    return JWTSettings(jwt_secret=TEST_JWT_SECRET)


@pytest.fixture
def verification_tokens(user_repo, clock):
    return VerificationTokenService(InMemoryTokenRepository(), user_repo, clock=clock)


@pytest.fixture
def reset_tokens(user_repo, clock):
    return PasswordResetTokenService(InMemoryTokenRepository(), user_repo, clock=clock)


@pytest.fixture
def refresh_tokens(user_repo, clock):
    return RefreshTokenService(InMemoryTokenRepository(), user_repo, clock=clock)


@pytest.fixture
def auth_service(
    user_repo, verification_tokens, reset_tokens, refresh_tokens, email_provider, jwt_settings, clock
):
    return AuthService(
        users=user_repo,
        verification_tokens=verification_tokens,
        reset_tokens=reset_tokens,
        refresh_tokens=refresh_tokens,
        email_provider=email_provider,
        jwt_settings=jwt_settings,
        password_hash_cost=1,
        clock=clock,
    )


@pytest.fixture
def question_service(question_repo, clock):
    return QuestionService(question_repo, clock=clock)


@pytest.fixture
def participant(user_repo):
    return user_repo.add(make_user())


@pytest.fixture
def admin(user_repo):
    return user_repo.add(
        make_user(email="admin@example.com", pseudo="admin", role=Role.ADMIN, email_verified=True)
    )
