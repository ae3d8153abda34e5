"""MongoDB implementation of UserRepository (`users` collection)."""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from schemas.models.user import UserDoc
from shared.logging import get_logger

log = get_logger(__name__)

USERS_COLLECTION = "users"


class MongoUserRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def find_by_id(self, user_id: ObjectId) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"_id": user_id}))

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"email": email}))

    async def find_by_pseudo(self, pseudo: str) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"pseudo": pseudo}))

    async def insert(self, user: UserDoc) -> UserDoc:
        """Insert *user* and return it with its generated id.

        Raises:
            ConflictError: when the unique email/pseudo index rejects the
                document (two registrations racing past the service checks).
        """
        try:
            result = await self._col.insert_one(user.to_mongo())
        except DuplicateKeyError as exc:
            key_pattern = (exc.details or {}).get("keyPattern")
            log.warning("user_insert_duplicate", key_pattern=key_pattern)
            raise ConflictError("Email or pseudo already in use") from exc
        return user.model_copy(update={"id": result.inserted_id})

    async def set_password_hash(self, user_id: ObjectId, password_hash: str) -> None:
        await self._col.update_one(
            {"_id": user_id}, {"$set": {"password_hash": password_hash}}
        )

    async def mark_email_verified(self, user_id: ObjectId) -> Optional[UserDoc]:
        doc = await self._col.find_one_and_update(
            {"_id": user_id},
            {"$set": {"email_verified": True}},
            return_document=ReturnDocument.AFTER,
        )
        return UserDoc.from_mongo(doc)
