"""Tests for the in-memory store: filter, sort and CRUD semantics."""

import pytest
from bson import ObjectId

from app.db.memory_store import InMemoryRecipeStore, matches
from app.db.store import InvalidRecipeId
from app.services.query import build_query_spec


def _titles(docs):
    return [d["title"] for d in docs]


@pytest.mark.asyncio
async def test_default_sort_is_rating_desc_with_nulls_last(store):
    docs = await store.find(build_query_spec({}))
    assert _titles(docs) == ["Sweet Potato Pie", "Apple Pie by Grandma Ople", "Pumpkin Soup", "Plain Toast"]


@pytest.mark.asyncio
async def test_sort_title_asc(store):
    docs = await store.find(build_query_spec({"sort": "title:asc"}))
    assert _titles(docs) == ["Apple Pie by Grandma Ople", "Plain Toast", "Pumpkin Soup", "Sweet Potato Pie"]


@pytest.mark.asyncio
async def test_title_is_case_insensitive_substring(store):
    docs = await store.find(build_query_spec({"title": "PIE"}))
    assert _titles(docs) == ["Sweet Potato Pie", "Apple Pie by Grandma Ople"]


@pytest.mark.asyncio
async def test_cuisine_is_exact(store):
    assert await store.count(build_query_spec({"cuisine": "Soup Recipes"})) == 1
    assert await store.count(build_query_spec({"cuisine": "Soup"})) == 0


@pytest.mark.asyncio
async def test_rating_filter_skips_nulls(store):
    docs = await store.find(build_query_spec({"rating": "<4.6"}))
    assert _titles(docs) == ["Apple Pie by Grandma Ople", "Pumpkin Soup"]


@pytest.mark.asyncio
async def test_total_time_filter(store):
    docs = await store.find(build_query_spec({"total_time": "<=45"}))
    assert _titles(docs) == ["Pumpkin Soup", "Plain Toast"]


@pytest.mark.asyncio
async def test_calories_filter_excludes_non_numeric(store):
    docs = await store.find(build_query_spec({"calories": "<=400"}))
    assert _titles(docs) == ["Sweet Potato Pie"]
    docs = await store.find(build_query_spec({"calories": ">=0"}))
    assert _titles(docs) == ["Sweet Potato Pie", "Apple Pie by Grandma Ople"]


def test_calories_plain_number_is_compared():
    spec = build_query_spec({"calories": "=250"})
    assert matches({"title": "x", "nutrients": {"calories": 250}}, spec)
    assert not matches({"title": "x", "nutrients": {"calories": "kcal"}}, spec)
    assert not matches({"title": "x", "nutrients": None}, spec)
    assert not matches({"title": "x"}, spec)


@pytest.mark.asyncio
async def test_pagination(store):
    spec = build_query_spec({"page": "2", "limit": "3"})
    docs = await store.find(spec, skip=spec.skip, limit=spec.limit)
    assert _titles(docs) == ["Plain Toast"]
    assert await store.count(spec) == 4


@pytest.mark.asyncio
async def test_crud_round():
    s = InMemoryRecipeStore()
    saved = await s.insert({"title": "Soup", "rating": 4.0})
    rid = str(saved["_id"])
    assert saved["created_at"] == saved["updated_at"]

    got = await s.get(rid)
    assert got["title"] == "Soup"

    updated = await s.update(rid, {"rating": 4.2})
    assert updated["rating"] == 4.2
    assert updated["title"] == "Soup"

    removed = await s.delete(rid)
    assert removed["title"] == "Soup"
    assert await s.get(rid) is None
    assert await s.delete(rid) is None


@pytest.mark.asyncio
async def test_unknown_id_returns_none():
    s = InMemoryRecipeStore()
    rid = str(ObjectId())
    assert await s.get(rid) is None
    assert await s.update(rid, {"rating": 1}) is None


@pytest.mark.asyncio
async def test_malformed_id_raises():
    s = InMemoryRecipeStore()
    with pytest.raises(InvalidRecipeId):
        await s.get("not-an-id")


@pytest.mark.asyncio
async def test_returned_docs_are_copies(store):
    docs = await store.find(build_query_spec({"title": "toast"}))
    docs[0]["title"] = "changed"
    again = await store.find(build_query_spec({"title": "toast"}))
    assert again[0]["title"] == "Plain Toast"


@pytest.mark.asyncio
async def test_insert_many_and_clear():
    s = InMemoryRecipeStore()
    assert await s.insert_many([{"title": "a"}, {"title": "b"}]) == 2
    assert await s.count(build_query_spec({})) == 2
    await s.clear()
    assert await s.count(build_query_spec({})) == 0
