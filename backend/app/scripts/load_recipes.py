# scripts/load_recipes.py
# JSON dump → recipe store.
# usage: python -m app.scripts.load_recipes US_recipes.json [--drop]
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from app.core.config import configure_logging, settings
from app.db.init import create_store
from app.db.models.recipe import RecipeIn, normalize_numeric_fields

log = logging.getLogger("app.scripts.load_recipes")

def read_records(path: Path) -> List[Dict[str, Any]]:
    # accepts a JSON array or an object keyed by row number ({"0": {...}, "1": {...}})
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = list(raw.values())
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON array or object of recipes")
    return [r for r in raw if isinstance(r, dict)]

def clean_records(records: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], int]:
    """numeric fields → number|None, then schema check; returns (docs, skipped)"""
    docs: List[Dict[str, Any]] = []
    skipped = 0
    for i, r in enumerate(records):
        try:
            docs.append(RecipeIn.model_validate(normalize_numeric_fields(r)).model_dump())
        except ValidationError as e:
            skipped += 1
            log.warning("skip record %d (%s): %s", i, r.get("title"), e.errors()[0].get("msg"))
    return docs, skipped

async def load(path: Path, drop: bool = False) -> int:
    store = create_store(settings)
    try:
        await store.ping()
        await store.ensure_indexes()
        if drop:
            await store.clear()
        docs, skipped = clean_records(read_records(path))
        inserted = await store.insert_many(docs)
        log.info("loaded %d recipes from %s (skipped=%d)", inserted, path, skipped)
        return inserted
    finally:
        await store.close()

def main() -> None:
    ap = argparse.ArgumentParser(description="Load recipes from a JSON file into the store.")
    ap.add_argument("path", type=Path)
    ap.add_argument("--drop", action="store_true", help="delete existing recipes first")
    args = ap.parse_args()

    configure_logging()
    asyncio.run(load(args.path, drop=args.drop))

if __name__ == "__main__":
    main()
