"""
Request DTOs for question endpoints.

CreateQuestionRequest - POST /questions
UpdateQuestionRequest - PUT /questions/{id}
AttemptRequest        - POST /questions/{id}/attempt

type / niveau / difficulte are kept loose here: QuestionService checks them
and reports the offending field.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateQuestionRequest(BaseModel):
    """Request body for POST /questions."""

    model_config = ConfigDict(populate_by_name=True)

    enonce: str = Field(min_length=1)
    solution: str = Field(min_length=1)
    type: str
    theme: str = Field(min_length=1)
    niveau: str
    difficulte: int
    options: Optional[list[str]] = None
    tolerance: Optional[float] = None


class UpdateQuestionRequest(BaseModel):
    """Request body for PUT /questions/{id}; omitted fields keep their value."""

    model_config = ConfigDict(populate_by_name=True)

    enonce: Optional[str] = Field(default=None, min_length=1)
    solution: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    theme: Optional[str] = Field(default=None, min_length=1)
    niveau: Optional[str] = None
    difficulte: Optional[int] = None
    options: Optional[list[str]] = None
    tolerance: Optional[float] = None


class AttemptRequest(BaseModel):
    """Request body for POST /questions/{id}/attempt."""

    model_config = ConfigDict(populate_by_name=True)

    reponse: str
    temps_ms: Optional[int] = Field(default=None, alias="tempsMs", ge=0)
