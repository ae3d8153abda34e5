"""Unit tests for shared.answer_validation."""

import pytest

from schemas.models.question import QuestionType
from shared.answer_validation import (
    CORRECT_EXPLANATION,
    DEFAULT_NUMERIC_TOLERANCE,
    effective_tolerance,
    evaluate_attempt,
    explain,
    normalize_answer,
    normalize_latex,
    parse_number,
    validate_answer,
)


class TestNormalization:
    def test_trims_and_collapses_whitespace(self):
        assert normalize_answer("  a \t b\n\nc  ") == "a b c"

    def test_latex_normal_form(self):
        assert normalize_latex("X^2 + 2*(x) + 1") == "x^2+2{x}+1"


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [("3.14", 3.14), ("-2", -2.0), ("+0.5", 0.5), (".5", 0.5), ("1e3", 1000.0), ("7.", 7.0)],
    )
    def test_decimal_literals(self, raw, expected):
        assert parse_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["", "abc", "3,14", "nan", "inf", "1/2", "3.1.4", "0x10"])
    def test_rejects_non_numbers(self, raw):
        assert parse_number(raw) is None


class TestEffectiveTolerance:
    @pytest.mark.parametrize("tolerance", [None, 0, -1.0])
    def test_defaults_when_missing_or_not_positive(self, tolerance):
        assert effective_tolerance(tolerance) == DEFAULT_NUMERIC_TOLERANCE

    def test_keeps_positive_tolerance(self):
        assert effective_tolerance(0.5) == 0.5


class TestNumericAnswers:
    @pytest.mark.parametrize(
        "answer, expected",
        [("3.15", True), ("3.14", True), (" 3.13 ", True), ("3.17", False), ("pi", False)],
    )
    def test_with_question_tolerance(self, answer, expected):
        assert validate_answer(QuestionType.NUMERIQUE, "3.14", answer, 0.02) is expected

    def test_default_tolerance(self):
        assert validate_answer(QuestionType.NUMERIQUE, "2", "2.01", None) is True
        assert validate_answer(QuestionType.NUMERIQUE, "2", "2.02", 0) is False

    def test_unparseable_solution_is_never_matched(self):
        assert validate_answer(QuestionType.NUMERIQUE, "about 2", "2") is False


class TestLatexAnswers:
    def test_equivalent_spelling_matches(self):
        assert validate_answer(QuestionType.LATEX, "x^2+2x+1", "X^2 + 2*x+1") is True

    def test_parentheses_match_braces(self):
        assert validate_answer(QuestionType.LATEX, "\\frac{1}{2}", "\\frac(1)(2)") is True

    def test_commutated_expression_does_not_match(self):
        assert validate_answer(QuestionType.LATEX, "x+y", "y+x") is False


class TestChoiceAnswers:
    @pytest.mark.parametrize("answer", ["Paris", " paris ", "PARIS"])
    def test_case_and_space_insensitive(self, answer):
        assert validate_answer(QuestionType.QCM, "Paris", answer) is True

    def test_other_option(self):
        assert validate_answer(QuestionType.QCM, "Paris", "Lyon") is False


def test_unknown_type_is_incorrect():
    assert validate_answer("ESSAY", "42", "42") is False


class TestExplain:
    def test_correct(self):
        assert explain(QuestionType.QCM, "Paris", True) == CORRECT_EXPLANATION

    @pytest.mark.parametrize("question_type", list(QuestionType))
    def test_incorrect_echoes_solution(self, question_type):
        assert "42" in explain(question_type, "42", False)

    def test_unknown_type_does_not_echo(self):
        assert "42" not in explain("ESSAY", "42", False)


class TestEvaluateAttempt:
    def test_correct_attempt_scores_one_point(self, question_factory):
        result = evaluate_attempt(question_factory(), "3.15")
        assert result.correct is True
        assert result.points == 1
        assert result.solution == "3.14"
        assert result.explanation == CORRECT_EXPLANATION

    def test_wrong_attempt_scores_zero(self, question_factory):
        result = evaluate_attempt(question_factory(), "3.17")
        assert result.correct is False
        assert result.points == 0
        assert "3.14" in result.explanation
