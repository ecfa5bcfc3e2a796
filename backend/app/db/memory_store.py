# app/db/memory_store.py
# In-process backend (STORE_BACKEND=memory, tests). Mirrors the Mongo backend's
# filter and sort semantics in plain Python.

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from app.db.store import RecipeStore, parse_object_id
from app.services.query import QuerySpec, SortDirection, leading_number

_MISSING = object()


def _lookup(doc: Dict[str, Any], path: str) -> Any:
    cur: Any = doc
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return _MISSING
        cur = cur[part]
    return cur


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def matches(doc: Dict[str, Any], spec: QuerySpec) -> bool:
    if spec.title:
        title = doc.get("title")
        if not isinstance(title, str) or spec.title.lower() not in title.lower():
            return False
    if spec.cuisine and doc.get("cuisine") != spec.cuisine:
        return False
    for field, pred in spec.numeric.items():
        v = _lookup(doc, field)
        if not _is_number(v) or not pred.test(v):
            return False
    if spec.calories is not None:
        cal = leading_number(_lookup(doc, "nutrients.calories"))
        if cal is None or not spec.calories.test(cal):
            return False
    return True


def _sort_key(v: Any) -> tuple:
    # missing/null first, then numbers, then strings (Mongo ascending order)
    if v is _MISSING or v is None:
        return (0, 0)
    if _is_number(v):
        return (1, v)
    if isinstance(v, str):
        return (2, v)
    return (3, str(v))


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRecipeStore(RecipeStore):
    def __init__(self, docs: Optional[Iterable[Dict[str, Any]]] = None) -> None:
        self._data: Dict[ObjectId, Dict[str, Any]] = {}
        for d in docs or []:
            self._put(d)

    def _put(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        now = _now()
        d = copy.deepcopy(doc)
        d.setdefault("_id", ObjectId())
        d.setdefault("created_at", now)
        d.setdefault("updated_at", now)
        self._data[d["_id"]] = d
        return copy.deepcopy(d)

    def _select(self, spec: QuerySpec) -> List[Dict[str, Any]]:
        docs = sorted(self._data.values(), key=lambda d: d["_id"])
        docs = [d for d in docs if matches(d, spec)]
        docs.sort(
            key=lambda d: _sort_key(_lookup(d, spec.sort.field)),
            reverse=spec.sort.direction is SortDirection.DESC,
        )
        return docs

    async def count(self, spec: QuerySpec) -> int:
        return len(self._select(spec))

    async def find(self, spec: QuerySpec, skip: int = 0, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        docs = self._select(spec)[skip:]
        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def get(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        d = self._data.get(parse_object_id(recipe_id))
        return copy.deepcopy(d) if d else None

    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        return self._put({k: v for k, v in doc.items() if k != "_id"})

    async def insert_many(self, docs: Iterable[Dict[str, Any]]) -> int:
        n = 0
        for d in docs:
            await self.insert(d)
            n += 1
        return n

    async def update(self, recipe_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        d = self._data.get(parse_object_id(recipe_id))
        if d is None:
            return None
        d.update(copy.deepcopy(changes))
        d["updated_at"] = _now()
        return copy.deepcopy(d)

    async def delete(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        return self._data.pop(parse_object_id(recipe_id), None)

    async def clear(self) -> None:
        self._data.clear()
