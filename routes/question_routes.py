"""
Question catalog endpoints.

GET    /questions                 - filtered, paginated listing (public)
GET    /questions/stats           - counts by type / niveau / difficulte
GET    /questions/themes/list     - distinct themes, sorted
GET    /questions/{id}            - one question
POST   /questions                 - create (admin)
PUT    /questions/{id}            - update (admin)
DELETE /questions/{id}            - delete (admin)
POST   /questions/{id}/attempt    - score an answer (authenticated)

Static paths are declared before /{question_id} so they are not captured as ids.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from dependencies import get_current_user, get_question_service
from repositories.protocols import QuestionFilter
from schemas.dto.requests.question import (
    AttemptRequest,
    CreateQuestionRequest,
    UpdateQuestionRequest,
)
from schemas.dto.responses.common import ErrorResponse
from schemas.dto.responses.question import (
    AttemptResponse,
    PaginationMeta,
    QuestionListResponse,
    QuestionResponse,
    QuestionStatsResponse,
)
from schemas.models.question import QuestionType
from schemas.models.user import Categorie, UserDoc
from services.question_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, QuestionService

router = APIRouter(
    prefix="/questions",
    tags=["questions"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


@router.get("", response_model=QuestionListResponse)
async def list_questions(
    theme: Optional[str] = Query(None),
    niveau: Optional[Categorie] = Query(None),
    difficulte: Optional[int] = Query(None, ge=1, le=5),
    type_: Optional[QuestionType] = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: QuestionService = Depends(get_question_service),
) -> QuestionListResponse:
    filters = QuestionFilter(theme=theme, level=niveau, difficulty=difficulte, type=type_)
    result = await service.list(filters, page=page, limit=limit)
    return QuestionListResponse(
        questions=[QuestionResponse.from_doc(q) for q in result.questions],
        pagination=PaginationMeta(
            page=result.page, limit=result.limit, total=result.total, pages=result.pages
        ),
    )


@router.get("/stats", response_model=QuestionStatsResponse)
async def question_stats(
    service: QuestionService = Depends(get_question_service),
) -> QuestionStatsResponse:
    stats = await service.stats()
    return QuestionStatsResponse(
        total=stats.total,
        by_type=stats.by_type,
        by_niveau=stats.by_level,
        by_difficulte=stats.by_difficulty,
    )


@router.get("/themes/list", response_model=list[str])
async def list_themes(
    service: QuestionService = Depends(get_question_service),
) -> list[str]:
    return await service.themes()


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: str, service: QuestionService = Depends(get_question_service)
) -> QuestionResponse:
    return QuestionResponse.from_doc(await service.get(question_id))


@router.post("", status_code=201, response_model=QuestionResponse)
async def create_question(
    body: CreateQuestionRequest,
    user: UserDoc = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionResponse:
    return QuestionResponse.from_doc(await service.create(body, user))


@router.put("/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: str,
    body: UpdateQuestionRequest,
    user: UserDoc = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> QuestionResponse:
    return QuestionResponse.from_doc(await service.update(question_id, body, user))


@router.delete("/{question_id}", status_code=204)
async def delete_question(
    question_id: str,
    user: UserDoc = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> Response:
    await service.delete(question_id, user)
    return Response(status_code=204)


@router.post("/{question_id}/attempt", response_model=AttemptResponse)
async def attempt_question(
    question_id: str,
    body: AttemptRequest,
    user: UserDoc = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
) -> AttemptResponse:
    result = await service.attempt(question_id, body.reponse, body.temps_ms, actor=user)
    return AttemptResponse.from_result(result)
