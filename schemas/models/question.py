"""
Question document model.

Maps to the `questions` MongoDB collection.

Type-specific fields:
- tolerance is only kept for NUMERIQUE questions
- options (2–5 choices) are only kept for QCM questions
The service layer clears whichever of the two does not apply before writing.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from schemas.models.base import MongoBaseModel
from schemas.models.user import Categorie


class QuestionType(str, Enum):
    NUMERIQUE = "NUMERIQUE"  # free-text numeric answer, compared with a tolerance
    LATEX = "LATEX"  # symbolic expression, compared syntactically
    QCM = "QCM"  # multiple choice


class QuestionDoc(MongoBaseModel):
    """Document model for the `questions` collection."""

    statement: str
    solution: str
    type: QuestionType
    theme: str
    level: Categorie
    difficulty: int = Field(ge=1, le=5)
    options: Optional[list[str]] = None
    tolerance: Optional[float] = Field(default=None, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
