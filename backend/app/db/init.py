# app/db/init.py
# Store construction + FastAPI dependency.
# The store is built once at startup and kept on app.state; routes receive it via Depends(get_store).

from __future__ import annotations

import logging
from asyncio import sleep

from fastapi import HTTPException, Request

from app.core.config import Settings
from app.db.memory_store import InMemoryRecipeStore
from app.db.mongo_store import MongoRecipeStore
from app.db.store import RecipeStore

log = logging.getLogger(__name__)

def create_store(settings: Settings) -> RecipeStore:
    backend = settings.STORE_BACKEND.lower()
    if backend == "memory":
        return InMemoryRecipeStore()
    if backend == "mongo":
        return MongoRecipeStore.connect(settings.MONGO_URI, settings.MONGO_DB, settings.MONGO_COLLECTION)
    raise ValueError(f"unknown STORE_BACKEND: {settings.STORE_BACKEND!r}")

async def init_store(settings: Settings, retries: int = 20, delay: float = 1.0) -> RecipeStore | None:
    # connect + ping (up to `retries` times, `delay` seconds apart); None if never ready
    store = create_store(settings)
    for i in range(retries):
        try:
            await store.ping()
            log.info("store ready (%s)", settings.STORE_BACKEND)
            return store
        except Exception as e:
            log.warning("store init retry %d: %s", i + 1, e)
            await sleep(delay)
    log.error("store init failed after %d retries", retries)
    await store.close()
    return None

def get_store(request: Request) -> RecipeStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Recipe store is not initialized yet.")
    return store
