"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.db.memory_store import InMemoryRecipeStore
from app.main import create_app

SAMPLE_RECIPES = [
    {
        "title": "Sweet Potato Pie",
        "cuisine": "Southern Recipes",
        "rating": 4.8,
        "total_time": 115,
        "nutrients": {"calories": "389 kcal", "fatContent": "21 g"},
        "serves": "8 servings",
    },
    {
        "title": "Apple Pie by Grandma Ople",
        "cuisine": "Apple Pie Recipes",
        "rating": 4.5,
        "total_time": 90,
        "nutrients": {"calories": "512 kcal"},
    },
    {
        "title": "Pumpkin Soup",
        "cuisine": "Soup Recipes",
        "rating": 3.9,
        "total_time": 45,
        "nutrients": {"calories": "n/a"},
    },
    {
        "title": "Plain Toast",
        "cuisine": None,
        "rating": None,
        "total_time": 5,
        "nutrients": {},
    },
]


@pytest.fixture
def store():
    """In-memory store seeded with a few recipes."""
    return InMemoryRecipeStore(SAMPLE_RECIPES)


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as c:
        yield c
