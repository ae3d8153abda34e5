"""Index bootstrap, run once from the application lifespan."""

from __future__ import annotations

from pymongo import ASCENDING
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from repositories.question_repository import QUESTIONS_COLLECTION
from repositories.user_repository import USERS_COLLECTION
from schemas.models.token import TOKEN_COLLECTIONS
from shared.logging import get_logger

log = get_logger(__name__)


async def ensure_indexes(db: AsyncDatabase) -> None:
    try:
        users = db[USERS_COLLECTION]
        await users.create_index([("email", ASCENDING)], unique=True)
        await users.create_index([("pseudo", ASCENDING)], unique=True)

        questions = db[QUESTIONS_COLLECTION]
        await questions.create_index(
            [("level", ASCENDING), ("difficulty", ASCENDING), ("theme", ASCENDING)]
        )
        await questions.create_index([("type", ASCENDING)])

        for collection_name in TOKEN_COLLECTIONS.values():
            tokens = db[collection_name]
            await tokens.create_index([("token", ASCENDING)], unique=True)
            await tokens.create_index([("user_id", ASCENDING)])
            # TTL: Mongo removes documents once expires_at passes
            await tokens.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)
    except PyMongoError as e:
        # Existing deployments may carry conflicting index options; the app still works
        log.warning("ensure_indexes_failed", error=str(e), error_type=type(e).__name__)
