"""
Response DTOs for question endpoints.

QuestionResponse       - a single question (GET/POST/PUT)
PaginationMeta         - pagination block of QuestionListResponse
QuestionListResponse   - GET /questions
AttemptResponse        - POST /questions/{id}/attempt
QuestionStatsResponse  - GET /questions/stats
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.models.question import QuestionDoc, QuestionType
from schemas.models.user import Categorie
from shared.answer_validation import AttemptResult


class QuestionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    enonce: str
    solution: str
    type: QuestionType
    theme: str
    niveau: Categorie
    difficulte: int
    options: Optional[list[str]] = None
    tolerance: Optional[float] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_doc(cls, question: QuestionDoc) -> "QuestionResponse":
        return cls(
            id=str(question.id),
            enonce=question.statement,
            solution=question.solution,
            type=question.type,
            theme=question.theme,
            niveau=question.level,
            difficulte=question.difficulty,
            options=question.options,
            tolerance=question.tolerance,
            created_at=question.created_at,
            updated_at=question.updated_at,
        )


class PaginationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    pages: int


class QuestionListResponse(BaseModel):
    """Response body for GET /questions."""

    model_config = ConfigDict(populate_by_name=True)

    questions: list[QuestionResponse]
    pagination: PaginationMeta


class AttemptResponse(BaseModel):
    """Response body for POST /questions/{id}/attempt."""

    model_config = ConfigDict(populate_by_name=True)

    correct: bool
    points: int
    solution: str
    explication: str

    @classmethod
    def from_result(cls, result: AttemptResult) -> "AttemptResponse":
        return cls(
            correct=result.correct,
            points=result.points,
            solution=result.solution,
            explication=result.explanation,
        )


class QuestionStatsResponse(BaseModel):
    """Response body for GET /questions/stats."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    by_type: dict[str, int] = Field(alias="byType")
    by_niveau: dict[str, int] = Field(alias="byNiveau")
    by_difficulte: dict[str, int] = Field(alias="byDifficulte")
