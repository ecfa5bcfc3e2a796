"""Bulk loader end-to-end against the in-memory backend."""

import json

import pytest

from app.db.memory_store import InMemoryRecipeStore
from app.scripts import load_recipes
from app.services.query import build_query_spec


@pytest.mark.asyncio
async def test_load_into_memory_store(tmp_path, monkeypatch):
    store = InMemoryRecipeStore([{"title": "old"}])
    monkeypatch.setattr(load_recipes, "create_store", lambda _settings: store)

    p = tmp_path / "recipes.json"
    p.write_text(json.dumps([
        {"title": "Sweet Potato Pie", "rating": 4.8, "nutrients": {"calories": "389 kcal"}},
        {"title": "Broken", "rating": "NaN", "prep_time": "NaN"},
        {"description": "no title"},
    ]), encoding="utf-8")

    inserted = await load_recipes.load(p, drop=True)
    assert inserted == 2

    docs = await store.find(build_query_spec({"sort": "title:asc"}))
    assert [d["title"] for d in docs] == ["Broken", "Sweet Potato Pie"]
    assert docs[0]["rating"] is None
