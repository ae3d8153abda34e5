"""
Answer validation engine: pure functions.

Both the canonical solution and the user's answer go through the same
pre-normalisation (trim, collapse whitespace runs) before a per-type rule
decides correctness:

- NUMERIQUE: both sides parsed as decimal literals, compared with a tolerance
- LATEX:     a second, purely syntactic normalisation then string equality;
             ``x+y`` and ``y+x`` are NOT considered equal
- QCM:       case-insensitive equality of the chosen option and the solution

Anything else is incorrect. No partial credit: a correct answer is worth
exactly one point.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from schemas.models.question import QuestionDoc, QuestionType

DEFAULT_NUMERIC_TOLERANCE = 0.01
POINTS_PER_CORRECT_ANSWER = 1

CORRECT_EXPLANATION = "✅ Correct answer!"

_INCORRECT_EXPLANATIONS = {
    QuestionType.NUMERIQUE: "❌ Incorrect answer. The expected answer was: {solution}",
    QuestionType.LATEX: "❌ Incorrect answer. The expected expression was: {solution}",
    QuestionType.QCM: "❌ Incorrect answer. The correct answer was: {solution}",
}
_GENERIC_INCORRECT_EXPLANATION = "❌ Incorrect answer."

_WHITESPACE_RUN = re.compile(r"\s+")
# Plain decimal literal: optional sign, digits with optional fraction, optional exponent
_DECIMAL_LITERAL = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass(frozen=True)
class AttemptResult:
    correct: bool
    points: int
    solution: str
    explanation: str


def normalize_answer(answer: str) -> str:
    """Trim and collapse internal whitespace runs to a single space."""
    return _WHITESPACE_RUN.sub(" ", answer.strip())


def normalize_latex(expression: str) -> str:
    """Syntactic normal form for symbolic answers.

    Removes all whitespace and ``*``, maps ``(``/``)`` to ``{``/``}`` and
    lower-cases the result.
    """
    expression = _WHITESPACE_RUN.sub("", expression)
    expression = expression.replace("*", "")
    expression = expression.replace("(", "{").replace(")", "}")
    return expression.lower()


def parse_number(value: str) -> Optional[float]:
    """Parse a normalised answer as a float, or None if it is not a number."""
    if not _DECIMAL_LITERAL.match(value):
        return None
    return float(value)


def effective_tolerance(tolerance: Optional[float]) -> float:
    """Question tolerance when strictly positive, the platform default otherwise."""
    if tolerance is None or tolerance <= 0:
        return DEFAULT_NUMERIC_TOLERANCE
    return tolerance


def is_numeric_match(user_answer: str, correct_answer: str, tolerance: Optional[float]) -> bool:
    user_value = parse_number(user_answer)
    correct_value = parse_number(correct_answer)
    if user_value is None or correct_value is None:
        return False
    return abs(user_value - correct_value) <= effective_tolerance(tolerance)


def is_latex_match(user_answer: str, correct_answer: str) -> bool:
    return normalize_latex(user_answer) == normalize_latex(correct_answer)


def is_choice_match(user_answer: str, correct_answer: str) -> bool:
    return user_answer.strip().lower() == correct_answer.strip().lower()


def _as_question_type(question_type: Union[QuestionType, str]) -> Optional[QuestionType]:
    try:
        return QuestionType(question_type)
    except ValueError:
        return None


def validate_answer(
    question_type: Union[QuestionType, str],
    solution: str,
    raw_answer: str,
    tolerance: Optional[float] = None,
) -> bool:
    """Decide whether *raw_answer* matches *solution* for *question_type*.

    Unknown question types are never correct.
    """
    user_answer = normalize_answer(raw_answer)
    correct_answer = normalize_answer(solution)

    kind = _as_question_type(question_type)
    if kind is QuestionType.NUMERIQUE:
        return is_numeric_match(user_answer, correct_answer, tolerance)
    if kind is QuestionType.LATEX:
        return is_latex_match(user_answer, correct_answer)
    if kind is QuestionType.QCM:
        return is_choice_match(user_answer, correct_answer)
    return False


def explain(question_type: Union[QuestionType, str], solution: str, correct: bool) -> str:
    """Human-readable feedback; incorrect answers echo the canonical solution."""
    if correct:
        return CORRECT_EXPLANATION
    template = _INCORRECT_EXPLANATIONS.get(_as_question_type(question_type))
    if template is None:
        return _GENERIC_INCORRECT_EXPLANATION
    return template.format(solution=solution)


def evaluate_attempt(question: QuestionDoc, raw_answer: str) -> AttemptResult:
    """Score one attempt at *question*."""
    correct = validate_answer(
        question.type, question.solution, raw_answer, question.tolerance
    )
    return AttemptResult(
        correct=correct,
        points=POINTS_PER_CORRECT_ANSWER if correct else 0,
        solution=question.solution,
        explanation=explain(question.type, question.solution, correct),
    )
