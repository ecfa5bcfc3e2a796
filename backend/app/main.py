# app/main.py
# FastAPI app setup: CORS, store lifecycle, health, routers.

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes_recipes import router as recipes_router
from app.core.config import Settings, configure_logging, settings as default_settings
from app.db.init import init_store
from app.db.store import RecipeStore

log = logging.getLogger(__name__)

def create_app(store: Optional[RecipeStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API. Pass `store` to skip connecting at startup (tests, embedding);
    otherwise the store is created from settings when the app starts.
    """
    settings = settings or default_settings
    app = FastAPI(title="Recipe API", version="0.1.0")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def on_startup() -> None:
        configure_logging(settings.LOG_LEVEL)
        if app.state.store is None:
            app.state.store = await init_store(settings)
        if app.state.store is None:
            return
        try:
            await app.state.store.ensure_indexes()
        except Exception as e:
            log.warning("ensure_indexes failed: %s", e)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        if app.state.store is not None:
            await app.state.store.close()

    @app.get("/")
    async def root():
        return {"status": "ok", "message": "Recipe API is running."}

    @app.get("/health")
    async def health():
        ok = {"status": "ok", "db": "skip"}
        if app.state.store is not None:
            try:
                await app.state.store.ping()
                ok["db"] = "ok"
            except Exception as e:
                ok["db"] = f"error: {e}"
        return ok

    app.include_router(recipes_router)
    return app

app = create_app()
