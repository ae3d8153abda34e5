"""
Password hashing gate.

Uses argon2id (via argon2-cffi). The cost factor is the argon2 time cost,
read from ``SecuritySettings.password_hash_cost`` by the callers; digests
embed their own parameters so verification never needs the cost.
"""

from __future__ import annotations

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

DEFAULT_PASSWORD_HASH_COST = 12


@lru_cache(maxsize=8)
def _hasher(cost: int) -> PasswordHasher:
    return PasswordHasher(time_cost=cost)


def hash_password(plain_password: str, cost: int = DEFAULT_PASSWORD_HASH_COST) -> str:
    """Hash *plain_password* with argon2id at time cost *cost*.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).

    Raises:
        ValueError: if *cost* is not a positive integer.
    """
    if cost < 1:
        raise ValueError("password hash cost must be a positive integer")
    return _hasher(cost).hash(plain_password)


@lru_cache(maxsize=8)
def dummy_password_hash(cost: int = DEFAULT_PASSWORD_HASH_COST) -> str:
    """Digest checked against when no account matches, so lookups that miss
    cost as much as a wrong password."""
    return hash_password("ishango-no-such-account", cost)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify *plain_password* against an argon2 *password_hash*.

    Returns:
        ``True`` if the password matches, ``False`` for any failure
        (wrong password, malformed hash, etc.).
    """
    try:
        return _hasher(DEFAULT_PASSWORD_HASH_COST).verify(password_hash, plain_password)
    except (VerificationError, InvalidHashError):
        return False
