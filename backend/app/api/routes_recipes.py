# app/api/routes_recipes.py
# Recipe CRUD + list/search.
# GET  /api/recipes          paginated, rating desc by default
# GET  /api/recipes/search   same filters, unpaginated
# POST /api/recipes, GET/PUT/DELETE /api/recipes/{rid}

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import settings
from app.db.init import get_store
from app.db.models.recipe import (
    RecipeIn,
    RecipeListOut,
    RecipeOut,
    RecipeSearchOut,
    RecipeUpdate,
    to_recipe_out,
)
from app.db.store import InvalidRecipeId, RecipeStore
from app.services.query import QuerySpec, build_query_spec

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

NOT_FOUND = "Recipe not found"

def recipe_query(
    page: Optional[str] = Query(None, description="page number (default 1)"),
    limit: Optional[str] = Query(None, description="page size (default 10)"),
    sort: Optional[str] = Query(None, description="field:asc|desc (default rating:desc)"),
    title: Optional[str] = Query(None, description="case-insensitive partial match"),
    cuisine: Optional[str] = Query(None, description="exact match"),
    rating: Optional[str] = Query(None, description="e.g. >=4.5"),
    total_time: Optional[str] = Query(None, description="e.g. <=60"),
    calories: Optional[str] = Query(None, description="e.g. <=400 (against '389 kcal' style values)"),
) -> QuerySpec:
    # all raw strings: anything unreadable just drops out of the filter
    params = {
        "page": page, "limit": limit, "sort": sort, "title": title, "cuisine": cuisine,
        "rating": rating, "total_time": total_time, "calories": calories,
    }
    return build_query_spec(params, max_limit=settings.MAX_PAGE_SIZE)

def _store_error(e: Exception, action: str) -> HTTPException:
    # call from inside an except block
    if isinstance(e, InvalidRecipeId):
        return HTTPException(status_code=400, detail=str(e))
    log.exception("%s error", action)
    return HTTPException(status_code=500, detail=str(e))

@router.get("", response_model=RecipeListOut)
async def list_recipes(spec: QuerySpec = Depends(recipe_query), store: RecipeStore = Depends(get_store)):
    try:
        total = await store.count(spec)
        docs = await store.find(spec, skip=spec.skip, limit=spec.limit)
    except Exception as e:
        raise _store_error(e, "list_recipes")
    return RecipeListOut(
        page=spec.page,
        limit=spec.limit,
        total=total,
        data=[to_recipe_out(d) for d in docs],
    )

# static path before /{rid}
@router.get("/search", response_model=RecipeSearchOut)
async def search_recipes(spec: QuerySpec = Depends(recipe_query), store: RecipeStore = Depends(get_store)):
    try:
        docs = await store.find(spec)
    except Exception as e:
        raise _store_error(e, "search_recipes")
    log.info("search %s -> %d", spec.model_dump(exclude_defaults=True), len(docs))
    return RecipeSearchOut(data=[to_recipe_out(d) for d in docs])

@router.post("", response_model=RecipeOut, status_code=201)
async def add_recipe(payload: RecipeIn, store: RecipeStore = Depends(get_store)):
    try:
        saved = await store.insert(payload.model_dump())
    except Exception as e:
        raise _store_error(e, "add_recipe")
    return to_recipe_out(saved)

@router.get("/{rid}", response_model=RecipeOut)
async def get_recipe(rid: str, store: RecipeStore = Depends(get_store)):
    try:
        doc = await store.get(rid)
    except Exception as e:
        raise _store_error(e, "get_recipe")
    if not doc:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return to_recipe_out(doc)

@router.put("/{rid}", response_model=RecipeOut)
async def update_recipe(rid: str, payload: RecipeUpdate, store: RecipeStore = Depends(get_store)):
    try:
        doc = await store.update(rid, payload.changes())
    except Exception as e:
        raise _store_error(e, "update_recipe")
    if not doc:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return to_recipe_out(doc)

@router.delete("/{rid}")
async def delete_recipe(rid: str, store: RecipeStore = Depends(get_store)):
    try:
        removed = await store.delete(rid)
    except Exception as e:
        raise _store_error(e, "delete_recipe")
    if not removed:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"message": "Recipe deleted"}
