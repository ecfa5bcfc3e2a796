# app/db/store.py
# Store collaborator used by the routes. Backends: MongoRecipeStore (motor), InMemoryRecipeStore.
# The routes only ever see this interface, never a raw collection.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from app.services.query import QuerySpec


class InvalidRecipeId(ValueError):
    pass


def parse_object_id(recipe_id: str) -> ObjectId:
    if not ObjectId.is_valid(recipe_id):
        raise InvalidRecipeId(f"invalid recipe id: {recipe_id!r}")
    return ObjectId(recipe_id)


class RecipeStore(ABC):
    """
    Recipe persistence.
    The calorie predicate of a QuerySpec is a derived comparison: each backend
    reads the leading number out of nutrients.calories ("389 kcal") its own way,
    and records whose calories do not coerce never match.
    """

    @abstractmethod
    async def count(self, spec: QuerySpec) -> int: ...

    @abstractmethod
    async def find(self, spec: QuerySpec, skip: int = 0, limit: Optional[int] = None) -> List[Dict[str, Any]]: ...

    @abstractmethod
    async def get(self, recipe_id: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def insert(self, doc: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def insert_many(self, docs: Iterable[Dict[str, Any]]) -> int: ...

    @abstractmethod
    async def update(self, recipe_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def delete(self, recipe_id: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def clear(self) -> None: ...

    async def ensure_indexes(self) -> None:
        return None

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        return None
