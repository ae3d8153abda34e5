"""
Question catalog: admin CRUD, filtered listing, answer attempts, statistics.

Field checks run on the full document (the merged one on update) before any
write; the offending field is reported by its wire name (enonce, niveau,
difficulte, ...). Mutations require an ADMIN actor.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from errors import ForbiddenError, NotFoundError, ValidationError
from repositories.protocols import QuestionFilter, QuestionRepository
from schemas.dto.requests.question import CreateQuestionRequest, UpdateQuestionRequest
from schemas.models.base import parse_object_id
from schemas.models.question import QuestionDoc, QuestionType
from schemas.models.user import Categorie, UserDoc
from shared.answer_validation import AttemptResult, evaluate_attempt
from shared.datetime_utils import Clock, utcnow
from shared.logging import get_logger
from shared.validators import (
    MAX_CHOICES,
    MIN_CHOICES,
    has_math_markup,
    is_valid_choice_list,
    is_valid_difficulty,
    is_valid_tolerance,
)

log = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class QuestionPage:
    questions: list[QuestionDoc]
    page: int
    limit: int
    total: int
    pages: int


@dataclass(frozen=True)
class QuestionStats:
    total: int
    by_type: dict[str, int]
    by_level: dict[str, int]
    by_difficulty: dict[str, int]


def _enum_member(enum_cls, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def validate_question_fields(data: dict[str, Any]) -> None:
    """Check a question payload keyed by wire names.

    Raises:
        ValidationError: on the first rule the payload breaks.
    """
    for field in ("enonce", "solution", "theme"):
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{field} must be a non-empty string", field=field)

    question_type = _enum_member(QuestionType, data.get("type"))
    if question_type is None:
        allowed = ", ".join(t.value for t in QuestionType)
        raise ValidationError(f"type must be one of: {allowed}", field="type")

    if _enum_member(Categorie, data.get("niveau")) is None:
        allowed = ", ".join(c.value for c in Categorie)
        raise ValidationError(f"niveau must be one of: {allowed}", field="niveau")

    if not is_valid_difficulty(data.get("difficulte")):
        raise ValidationError("difficulte must be an integer between 1 and 5", field="difficulte")

    if question_type is QuestionType.NUMERIQUE and not is_valid_tolerance(data.get("tolerance")):
        raise ValidationError("tolerance must be zero or greater", field="tolerance")

    if question_type is QuestionType.QCM and not is_valid_choice_list(data.get("options")):
        raise ValidationError(
            f"QCM questions need between {MIN_CHOICES} and {MAX_CHOICES} options",
            field="options",
        )

    if question_type is QuestionType.LATEX and not has_math_markup(data.get("enonce")):
        raise ValidationError(
            "LATEX questions need math markup ($...$ or \\(...\\)) in enonce",
            field="enonce",
        )


def _to_wire(question: QuestionDoc) -> dict[str, Any]:
    return {
        "enonce": question.statement,
        "solution": question.solution,
        "type": question.type.value,
        "theme": question.theme,
        "niveau": question.level.value,
        "difficulte": question.difficulty,
        "options": question.options,
        "tolerance": question.tolerance,
    }


def _from_wire(data: dict[str, Any], **extra: Any) -> QuestionDoc:
    question_type = QuestionType(data["type"])
    return QuestionDoc(
        statement=data["enonce"],
        solution=data["solution"],
        type=question_type,
        theme=data["theme"],
        level=Categorie(data["niveau"]),
        difficulty=data["difficulte"],
        options=data.get("options") if question_type is QuestionType.QCM else None,
        tolerance=data.get("tolerance") if question_type is QuestionType.NUMERIQUE else None,
        **extra,
    )


def _group_key(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def _require_admin(actor: Optional[UserDoc]) -> None:
    if actor is None or not actor.is_admin:
        raise ForbiddenError("Only administrators can manage questions")


class QuestionService:
    def __init__(self, questions: QuestionRepository, clock: Clock = utcnow) -> None:
        self._questions = questions
        self._clock = clock

    async def _load(self, question_id: str) -> QuestionDoc:
        oid = parse_object_id(question_id)
        question = await self._questions.find_by_id(oid) if oid is not None else None
        if question is None:
            raise NotFoundError("Question not found")
        return question

    async def create(self, request: CreateQuestionRequest, actor: Optional[UserDoc]) -> QuestionDoc:
        _require_admin(actor)
        data = request.model_dump()
        validate_question_fields(data)

        now = self._clock()
        question = await self._questions.insert(_from_wire(data, created_at=now, updated_at=now))
        log.info("question_created", question_id=str(question.id), actor_id=str(actor.id))
        return question

    async def list(
        self,
        filters: Optional[QuestionFilter] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> QuestionPage:
        filters = filters or QuestionFilter()
        page = max(page, 1)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        total = await self._questions.count(filters)
        questions = await self._questions.find_page(filters, skip=(page - 1) * limit, limit=limit)
        return QuestionPage(
            questions=questions,
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        )

    async def get(self, question_id: str) -> QuestionDoc:
        return await self._load(question_id)

    async def update(
        self, question_id: str, request: UpdateQuestionRequest, actor: Optional[UserDoc]
    ) -> QuestionDoc:
        _require_admin(actor)
        existing = await self._load(question_id)

        merged = _to_wire(existing)
        merged.update(request.model_dump(exclude_unset=True))
        validate_question_fields(merged)

        updated = await self._questions.replace(
            _from_wire(
                merged,
                id=existing.id,
                created_at=existing.created_at,
                updated_at=self._clock(),
            )
        )
        if updated is None:
            # Deleted between the read and the write
            raise NotFoundError("Question not found")
        log.info("question_updated", question_id=str(existing.id), actor_id=str(actor.id))
        return updated

    async def delete(self, question_id: str, actor: Optional[UserDoc]) -> None:
        _require_admin(actor)
        oid = parse_object_id(question_id)
        if oid is None or not await self._questions.delete(oid):
            raise NotFoundError("Question not found")
        log.info("question_deleted", question_id=question_id, actor_id=str(actor.id))

    async def attempt(
        self,
        question_id: str,
        answer: str,
        elapsed_ms: Optional[int] = None,
        actor: Optional[UserDoc] = None,
    ) -> AttemptResult:
        question = await self._load(question_id)
        result = evaluate_attempt(question, answer)
        log.info(
            "question_attempted",
            question_id=question_id,
            user_id=str(actor.id) if actor else None,
            correct=result.correct,
            elapsed_ms=elapsed_ms,
        )
        return result

    async def themes(self) -> list[str]:
        return await self._questions.distinct_themes()

    async def stats(self) -> QuestionStats:
        by_type = await self._questions.count_by("type")
        by_level = await self._questions.count_by("level")
        by_difficulty = await self._questions.count_by("difficulty")
        return QuestionStats(
            total=await self._questions.count(),
            by_type={_group_key(k): v for k, v in by_type.items()},
            by_level={_group_key(k): v for k, v in by_level.items()},
            by_difficulty={_group_key(k): v for k, v in by_difficulty.items()},
        )
