"""MongoDB implementation of TokenRepository (one collection per token kind)."""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection

from schemas.models.token import TokenDoc


class MongoTokenRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def insert(self, token: TokenDoc) -> TokenDoc:
        result = await self._col.insert_one(token.to_mongo())
        return token.model_copy(update={"id": result.inserted_id})

    async def find_by_token(self, token: str) -> Optional[TokenDoc]:
        return TokenDoc.from_mongo(await self._col.find_one({"token": token}))

    async def delete_by_token(self, token: str) -> None:
        await self._col.delete_many({"token": token})

    async def delete_for_user(self, user_id: ObjectId) -> int:
        result = await self._col.delete_many({"user_id": user_id})
        return result.deleted_count
