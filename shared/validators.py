"""
Input validators: framework-agnostic, pure functions.

All validators are stateless predicates (or return the list of unmet
requirements); the service layer decides which error to raise.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

PSEUDO_PATTERN = r"^[a-zA-Z0-9_-]+$"
PSEUDO_MIN_LENGTH = 3
PSEUDO_MAX_LENGTH = 30

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5

MIN_CHOICES = 2
MAX_CHOICES = 5

# Inline ``$...$`` / display ``$$...$$`` or ``\( ... \)`` delimiters
MATH_MARKUP_DELIMITERS = ("$", "\\(")


def validate_password(password: Optional[str]) -> List[str]:
    """Return the password requirements *password* does not meet.

    An empty list means the password is acceptable.
    """
    if not password:
        return ["Password is required"]

    missing = []
    if len(password) < PASSWORD_MIN_LENGTH:
        missing.append(f"At least {PASSWORD_MIN_LENGTH} characters")
    if len(password) > PASSWORD_MAX_LENGTH:
        missing.append(f"Maximum {PASSWORD_MAX_LENGTH} characters")
    if not re.search(r"[a-z]", password):
        missing.append("At least one lowercase letter")
    if not re.search(r"[A-Z]", password):
        missing.append("At least one uppercase letter")
    if not re.search(r"[0-9]", password):
        missing.append("At least one number")
    return missing


def validate_pseudo(pseudo: str) -> bool:
    """Return True if *pseudo* is 3–30 letters, digits, ``_`` or ``-``."""
    if not PSEUDO_MIN_LENGTH <= len(pseudo) <= PSEUDO_MAX_LENGTH:
        return False
    return bool(re.match(PSEUDO_PATTERN, pseudo))


def is_valid_difficulty(value: Any) -> bool:
    """Return True for an integer (not a bool) in [1, 5]."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_DIFFICULTY <= value <= MAX_DIFFICULTY


def is_valid_tolerance(value: Optional[float]) -> bool:
    """A missing tolerance is fine; a present one must be zero or greater."""
    return value is None or value >= 0


def is_valid_choice_list(options: Any) -> bool:
    """Return True if *options* is a list holding 2 to 5 choices."""
    if not isinstance(options, list):
        return False
    return MIN_CHOICES <= len(options) <= MAX_CHOICES


def has_math_markup(text: Optional[str]) -> bool:
    """Return True if *text* contains a recognizable LaTeX math delimiter."""
    if not text:
        return False
    return any(delimiter in text for delimiter in MATH_MARKUP_DELIMITERS)
