"""
User document model.

Maps to the `users` MongoDB collection.

Only the argon2 digest of the password is ever stored. Email and pseudo are
each backed by a unique index (see repositories.indexes).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from schemas.models.base import MongoBaseModel


class Role(str, Enum):
    ADMIN = "ADMIN"
    PARTICIPANT = "PARTICIPANT"


class Categorie(str, Enum):
    """Academic level, shared by users (category) and questions (niveau)."""

    LYCEE = "LYCEE"
    PREPA = "PREPA"
    UNIVERSITE = "UNIVERSITE"


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    email: str
    pseudo: str
    password_hash: str
    categorie: Categorie
    role: Role = Role.PARTICIPANT
    email_verified: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
