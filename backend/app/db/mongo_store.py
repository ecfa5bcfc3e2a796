# app/db/mongo_store.py
# MongoDB backend (motor). QuerySpec → Mongo filter/sort lives here.

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from app.db.indexes import ensure_recipe_indexes
from app.db.store import RecipeStore, parse_object_id
from app.services.query import NumericOp, NumericPredicate, QuerySpec, SortDirection

log = logging.getLogger(__name__)

MONGO_OPS = {
    NumericOp.EQ: "$eq",
    NumericOp.GT: "$gt",
    NumericOp.LT: "$lt",
    NumericOp.GTE: "$gte",
    NumericOp.LTE: "$lte",
}

CALORIES_PATH = "$nutrients.calories"

# first run of non-whitespace, with whitespace as str.split() sees it
CALORIE_TOKEN_RE = (
    "[^\t\n\x0b\x0c\r\x1c-\x1f \x85\xa0\u1680\u2000-\u200a"
    "\u2028\u2029\u202f\u205f\u3000]+"
)


def calories_expr(pred: NumericPredicate) -> Dict[str, Any]:
    """
    $expr for the derived calorie comparison:
    "389 kcal" → first whitespace-delimited token → double.
    $convert turns junk into null and the null guard drops it; plain numbers pass as-is.
    """
    token = {
        "$cond": [
            {"$eq": [{"$type": CALORIES_PATH}, "string"]},
            {"$let": {
                "vars": {"m": {"$regexFind": {"input": CALORIES_PATH, "regex": CALORIE_TOKEN_RE}}},
                "in": "$$m.match",
            }},
            CALORIES_PATH,
        ]
    }
    as_number = {"$convert": {"input": token, "to": "double", "onError": None, "onNull": None}}
    return {
        "$let": {
            "vars": {"cal": as_number},
            "in": {"$and": [
                {"$ne": ["$$cal", None]},
                {MONGO_OPS[pred.op]: ["$$cal", pred.value]},
            ]},
        }
    }


def build_mongo_filter(spec: QuerySpec) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if spec.title:
        # literal substring, case-insensitive
        q["title"] = {"$regex": re.escape(spec.title), "$options": "i"}
    if spec.cuisine:
        q["cuisine"] = spec.cuisine
    for field, pred in spec.numeric.items():
        q[field] = {MONGO_OPS[pred.op]: pred.value}
    if spec.calories is not None:
        q["$expr"] = calories_expr(spec.calories)
    return q


def build_mongo_sort(spec: QuerySpec) -> List[tuple]:
    direction = ASCENDING if spec.sort.direction is SortDirection.ASC else DESCENDING
    keys = [(spec.sort.field, direction)]
    if spec.sort.field != "_id":
        keys.append(("_id", ASCENDING))  # stable pages
    return keys


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MongoRecipeStore(RecipeStore):

    def __init__(self, col: AsyncIOMotorCollection, client: Optional[AsyncIOMotorClient] = None) -> None:
        self._col = col
        self._client = client

    @classmethod
    def connect(cls, uri: str, db_name: str, collection: str) -> "MongoRecipeStore":
        client = AsyncIOMotorClient(uri)
        return cls(client[db_name][collection], client=client)

    async def count(self, spec: QuerySpec) -> int:
        return await self._col.count_documents(build_mongo_filter(spec))

    async def find(self, spec: QuerySpec, skip: int = 0, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        cur = self._col.find(build_mongo_filter(spec)).sort(build_mongo_sort(spec))
        if skip:
            cur = cur.skip(skip)
        if limit:
            cur = cur.limit(limit)
        return await cur.to_list(length=limit)

    async def get(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        return await self._col.find_one({"_id": parse_object_id(recipe_id)})

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        d = {**doc, "created_at": now, "updated_at": now}
        res = await self._col.insert_one(d)
        d["_id"] = res.inserted_id
        return d

    async def insert_many(self, docs: Iterable[Dict[str, Any]]) -> int:
        now = _now()
        batch = [{**d, "created_at": now, "updated_at": now} for d in docs]
        if not batch:
            return 0
        res = await self._col.insert_many(batch, ordered=False)
        return len(res.inserted_ids)

    async def update(self, recipe_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        oid = parse_object_id(recipe_id)
        return await self._col.find_one_and_update(
            {"_id": oid},
            {"$set": {**changes, "updated_at": _now()}},
            return_document=ReturnDocument.AFTER,
        )

    async def delete(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        return await self._col.find_one_and_delete({"_id": parse_object_id(recipe_id)})

    async def clear(self) -> None:
        res = await self._col.delete_many({})
        log.info("cleared %s: %d docs", self._col.name, res.deleted_count)

    async def ensure_indexes(self) -> None:
        await ensure_recipe_indexes(self._col)

    async def ping(self) -> None:
        # raises if the server is not reachable yet
        await self._col.database.command("ping")

    async def close(self) -> None:
        if self._client:
            self._client.close()
        self._client = None
