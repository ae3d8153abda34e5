"""Unit tests for services.question_service."""

import pytest

from errors import ForbiddenError, NotFoundError, ValidationError
from repositories.protocols import QuestionFilter
from schemas.dto.requests.question import CreateQuestionRequest, UpdateQuestionRequest
from schemas.models.question import QuestionType
from schemas.models.user import Categorie
from services.question_service import validate_question_fields


def _payload(**kw):
    data = {
        "enonce": "Approximate pi",
        "solution": "3.14",
        "type": "NUMERIQUE",
        "theme": "Analyse",
        "niveau": "LYCEE",
        "difficulte": 2,
        "options": None,
        "tolerance": 0.02,
    }
    data.update(kw)
    return data


class TestValidateQuestionFields:
    def test_valid_numeric(self):
        validate_question_fields(_payload())

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"enonce": None}, "enonce"),
            ({"solution": "   "}, "solution"),
            ({"theme": None}, "theme"),
            ({"type": "ESSAY"}, "type"),
            ({"niveau": "COLLEGE"}, "niveau"),
            ({"difficulte": 0}, "difficulte"),
            ({"difficulte": 6}, "difficulte"),
            ({"tolerance": -0.5}, "tolerance"),
            ({"type": "QCM", "options": ["only one"]}, "options"),
            ({"type": "QCM", "options": ["a", "b", "c", "d", "e", "f"]}, "options"),
            ({"type": "QCM", "options": None}, "options"),
            ({"type": "LATEX", "enonce": "Expand (x+1)^2"}, "enonce"),
        ],
    )
    def test_rejects(self, overrides, field):
        with pytest.raises(ValidationError) as exc:
            validate_question_fields(_payload(**overrides))
        assert exc.value.field == field

    def test_valid_qcm_and_latex(self):
        validate_question_fields(_payload(type="QCM", options=["a", "b"], tolerance=None))
        validate_question_fields(_payload(type="LATEX", enonce="Expand $(x+1)^2$"))


class TestCreate:
    async def test_admin_creates(self, question_service, question_repo, admin):
        q = await question_service.create(CreateQuestionRequest(**_payload()), admin)
        assert q.id in question_repo.docs
        assert q.type is QuestionType.NUMERIQUE
        assert q.created_at is not None

    async def test_participant_forbidden(self, question_service, question_repo, participant):
        with pytest.raises(ForbiddenError):
            await question_service.create(CreateQuestionRequest(**_payload()), participant)
        assert question_repo.docs == {}

    async def test_irrelevant_fields_cleared(self, question_service, admin):
        q = await question_service.create(
            CreateQuestionRequest(**_payload(type="QCM", options=["a", "b"], solution="a")), admin
        )
        assert q.tolerance is None
        assert q.options == ["a", "b"]

    async def test_validation_before_write(self, question_service, question_repo, admin):
        with pytest.raises(ValidationError):
            await question_service.create(CreateQuestionRequest(**_payload(difficulte=9)), admin)
        assert question_repo.docs == {}


class TestList:
    @pytest.fixture
    def catalog(self, question_repo, question_factory):
        question_repo.add(question_factory(theme="Algebra", level=Categorie.PREPA, difficulty=3))
        question_repo.add(question_factory(theme="Algèbre linéaire", level=Categorie.UNIVERSITE, difficulty=5))
        question_repo.add(question_factory(theme="Geometry", level=Categorie.LYCEE, difficulty=1))
        question_repo.add(
            question_factory(
                theme="Logic", type=QuestionType.QCM, options=["a", "b"], solution="a",
                tolerance=None, level=Categorie.LYCEE, difficulty=2,
            )
        )

    async def test_pagination(self, question_service, catalog):
        page = await question_service.list(QuestionFilter(), page=2, limit=3)
        assert page.total == 4
        assert page.pages == 2
        assert len(page.questions) == 1

    async def test_theme_is_case_insensitive_substring(self, question_service, catalog):
        page = await question_service.list(QuestionFilter(theme="alg"))
        assert {q.theme for q in page.questions} == {"Algebra", "Algèbre linéaire"}

    async def test_exact_filters(self, question_service, catalog):
        page = await question_service.list(QuestionFilter(level=Categorie.LYCEE, type=QuestionType.QCM))
        assert [q.theme for q in page.questions] == ["Logic"]

    async def test_empty(self, question_service):
        page = await question_service.list()
        assert page.total == 0
        assert page.pages == 0
        assert page.limit == 20

    async def test_limit_capped(self, question_service):
        assert (await question_service.list(limit=500)).limit == 100


class TestGetUpdateDelete:
    @pytest.fixture
    def question(self, question_repo, question_factory):
        return question_repo.add(question_factory())

    async def test_get(self, question_service, question):
        assert (await question_service.get(str(question.id))).id == question.id

    @pytest.mark.parametrize("question_id", ["not-an-id", "65a000000000000000000000"])
    async def test_get_missing(self, question_service, question_id):
        with pytest.raises(NotFoundError):
            await question_service.get(question_id)

    async def test_update_merges(self, question_service, question, admin):
        updated = await question_service.update(
            str(question.id), UpdateQuestionRequest(difficulte=4), admin
        )
        assert updated.difficulty == 4
        assert updated.solution == question.solution
        assert updated.updated_at is not None

    async def test_update_validates_merged_document(self, question_service, question, admin):
        with pytest.raises(ValidationError) as exc:
            await question_service.update(str(question.id), UpdateQuestionRequest(type="QCM"), admin)
        assert exc.value.field == "options"

    async def test_update_rejects_blank_statement(self, question_service, question_repo, question, admin):
        with pytest.raises(ValidationError) as exc:
            await question_service.update(str(question.id), UpdateQuestionRequest(enonce=None), admin)
        assert exc.value.field == "enonce"
        assert question_repo.docs[question.id].statement == question.statement

    async def test_update_forbidden(self, question_service, question, participant):
        with pytest.raises(ForbiddenError):
            await question_service.update(str(question.id), UpdateQuestionRequest(difficulte=4), participant)

    async def test_update_missing(self, question_service, admin):
        with pytest.raises(NotFoundError):
            await question_service.update("65a000000000000000000000", UpdateQuestionRequest(), admin)

    async def test_delete(self, question_service, question_repo, question, admin):
        await question_service.delete(str(question.id), admin)
        assert question.id not in question_repo.docs
        with pytest.raises(NotFoundError):
            await question_service.delete(str(question.id), admin)

    async def test_delete_forbidden(self, question_service, question, participant):
        with pytest.raises(ForbiddenError):
            await question_service.delete(str(question.id), participant)


class TestAttemptThemesStats:
    async def test_attempt(self, question_service, question_repo, question_factory):
        q = question_repo.add(question_factory())
        result = await question_service.attempt(str(q.id), "3.15", elapsed_ms=800)
        assert result.correct is True
        assert result.points == 1

    async def test_attempt_missing(self, question_service):
        with pytest.raises(NotFoundError):
            await question_service.attempt("65a000000000000000000000", "1")

    async def test_themes_sorted_distinct(self, question_service, question_repo, question_factory):
        for theme in ("Geometry", "Algebra", "Geometry"):
            question_repo.add(question_factory(theme=theme))
        assert await question_service.themes() == ["Algebra", "Geometry"]

    async def test_stats(self, question_service, question_repo, question_factory):
        question_repo.add(question_factory(difficulty=1))
        question_repo.add(question_factory(difficulty=1, level=Categorie.PREPA))
        question_repo.add(
            question_factory(type=QuestionType.QCM, options=["a", "b"], solution="a", tolerance=None)
        )
        stats = await question_service.stats()
        assert stats.total == 3
        assert stats.by_type == {"NUMERIQUE": 2, "QCM": 1}
        assert stats.by_level == {"LYCEE": 2, "PREPA": 1}
        assert stats.by_difficulty == {"1": 2, "2": 1}
