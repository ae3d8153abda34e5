"""MongoDB implementation of QuestionRepository (`questions` collection)."""

from __future__ import annotations

import re
from typing import Any, Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from repositories.protocols import QuestionFilter
from schemas.models.question import QuestionDoc

QUESTIONS_COLLECTION = "questions"

# Catalog order: level, then difficulty, then theme
CATALOG_SORT = [("level", ASCENDING), ("difficulty", ASCENDING), ("theme", ASCENDING)]

GROUPABLE_FIELDS = frozenset({"type", "level", "difficulty"})


def build_question_query(filters: Optional[QuestionFilter]) -> dict:
    """Translate a QuestionFilter into a MongoDB query document."""
    query: dict[str, Any] = {}
    if filters is None:
        return query
    if filters.theme:
        query["theme"] = {"$regex": re.escape(filters.theme), "$options": "i"}
    if filters.level is not None:
        query["level"] = filters.level.value
    if filters.difficulty is not None:
        query["difficulty"] = filters.difficulty
    if filters.type is not None:
        query["type"] = filters.type.value
    return query


class MongoQuestionRepository:
    def __init__(self, collection: AsyncCollection) -> None:
        self._col = collection

    async def insert(self, question: QuestionDoc) -> QuestionDoc:
        result = await self._col.insert_one(question.to_mongo())
        return question.model_copy(update={"id": result.inserted_id})

    async def find_by_id(self, question_id: ObjectId) -> Optional[QuestionDoc]:
        return QuestionDoc.from_mongo(await self._col.find_one({"_id": question_id}))

    async def find_page(
        self, filters: QuestionFilter, skip: int, limit: int
    ) -> list[QuestionDoc]:
        cursor = (
            self._col.find(build_question_query(filters))
            .sort(CATALOG_SORT)
            .skip(skip)
            .limit(limit)
        )
        return [QuestionDoc.from_mongo(doc) for doc in await cursor.to_list()]

    async def count(self, filters: Optional[QuestionFilter] = None) -> int:
        return await self._col.count_documents(build_question_query(filters))

    async def replace(self, question: QuestionDoc) -> Optional[QuestionDoc]:
        data = question.to_mongo()
        data.pop("_id", None)
        doc = await self._col.find_one_and_replace(
            {"_id": question.id}, data, return_document=ReturnDocument.AFTER
        )
        return QuestionDoc.from_mongo(doc)

    async def delete(self, question_id: ObjectId) -> bool:
        result = await self._col.delete_one({"_id": question_id})
        return result.deleted_count > 0

    async def distinct_themes(self) -> list[str]:
        return sorted(await self._col.distinct("theme"))

    async def count_by(self, field: str) -> dict[Any, int]:
        """Return ``{value: count}`` for one of type / level / difficulty."""
        if field not in GROUPABLE_FIELDS:
            raise ValueError(f"Cannot group questions by {field!r}")
        cursor = await self._col.aggregate(
            [
                {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
                {"$sort": {"_id": 1}},
            ]
        )
        return {row["_id"]: row["count"] for row in await cursor.to_list()}
