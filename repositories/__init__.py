"""
Persistence layer.

Protocols describe what the services need; the Mongo* classes implement them
on top of pymongo's async client.
"""

from .protocols import QuestionFilter, QuestionRepository, TokenRepository, UserRepository
from .question_repository import MongoQuestionRepository
from .token_repository import MongoTokenRepository
from .user_repository import MongoUserRepository

__all__ = [
    "QuestionFilter",
    "QuestionRepository",
    "TokenRepository",
    "UserRepository",
    "MongoQuestionRepository",
    "MongoTokenRepository",
    "MongoUserRepository",
]
