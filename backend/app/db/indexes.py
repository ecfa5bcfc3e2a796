# Recipe collection indexes
# Called once from app startup (and by the bulk loader) through store.ensure_indexes().
from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

log = logging.getLogger(__name__)

# name → keys; these back the list/search filters and the default sort
RECIPE_INDEXES: Dict[str, List[Tuple[str, int]]] = {
    "title_1": [("title", 1)],
    "cuisine_1": [("cuisine", 1)],
    "rating_-1": [("rating", -1)],
    "total_time_1": [("total_time", 1)],
}

async def ensure_recipe_indexes(coll) -> None:
    # motor: index_information() is async
    existing: Dict[str, Dict[str, Any]] = await coll.index_information()
    for name, keys in RECIPE_INDEXES.items():
        if name in existing:
            continue
        await coll.create_index(keys, name=name)
        log.info("created index %s on %s", name, coll.name)
