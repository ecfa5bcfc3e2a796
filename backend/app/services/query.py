# app/services/query.py
# Query-string → Query Spec translation for recipe list/search.
# Pure and stateless: nothing here touches the store or raises on bad input.

from __future__ import annotations

import math
import re
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT_FIELD = "rating"

# fields that accept a plain numeric comparison (?rating=>=4.5)
NUMERIC_FILTER_FIELDS = ("rating", "total_time")

# two-character operators first so ">=" is never read as ">" + "=4.5"
NUMERIC_FILTER_RE = re.compile(r"(>=|<=|>|<|=)?\s*(\d+(?:\.\d+)?)", re.ASCII)

POSITIVE_INT_RE = re.compile(r"\d+", re.ASCII)

# skip and limit go out as BSON int64
MAX_INT64 = 2**63 - 1


class NumericOp(str, Enum):
    EQ = "eq"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"


_OPS = {
    ">": NumericOp.GT,
    "<": NumericOp.LT,
    ">=": NumericOp.GTE,
    "<=": NumericOp.LTE,
    "=": NumericOp.EQ,
}


class NumericPredicate(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: NumericOp
    value: float

    def test(self, x: float) -> bool:
        if self.op is NumericOp.GT:
            return x > self.value
        if self.op is NumericOp.LT:
            return x < self.value
        if self.op is NumericOp.GTE:
            return x >= self.value
        if self.op is NumericOp.LTE:
            return x <= self.value
        return x == self.value


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str = DEFAULT_SORT_FIELD
    direction: SortDirection = SortDirection.DESC


class QuerySpec(BaseModel):
    """
    One request's worth of filters, sort order and pagination.
    - title: case-insensitive substring
    - cuisine: exact value
    - numeric: read-only field -> predicate view (rating, total_time)
    - calories: derived predicate on the leading number of nutrients.calories
    """
    model_config = ConfigDict(frozen=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: SortSpec = Field(default_factory=SortSpec)
    title: Optional[str] = None
    cuisine: Optional[str] = None
    numeric_filters: Tuple[Tuple[str, NumericPredicate], ...] = ()
    calories: Optional[NumericPredicate] = None

    @property
    def numeric(self) -> Mapping[str, NumericPredicate]:
        return MappingProxyType(dict(self.numeric_filters))

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_numeric_filter(raw: Optional[str]) -> Optional[NumericPredicate]:
    # ">=4.5" / "<= 400" / "=3" / "12" -> predicate, anything else -> None
    if not raw or not isinstance(raw, str):
        return None
    m = NUMERIC_FILTER_RE.fullmatch(raw)
    if not m:
        return None
    op = _OPS[m.group(1) or "="]
    return NumericPredicate(op=op, value=float(m.group(2)))


def leading_number(value: Any) -> Optional[float]:
    """
    Best-effort numeric read of a unit-suffixed value ("389 kcal" -> 389.0).
    Plain numbers pass through; anything that does not coerce gives None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        parts = value.split(None, 1)
        if not parts:
            return None
        try:
            num = float(parts[0].strip())
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def _positive_int(raw: Optional[str], default: int) -> int:
    # ASCII digits only: no sign, "1_000" or non-Latin numerals
    if not isinstance(raw, str) or not POSITIVE_INT_RE.fullmatch(raw.strip()):
        return default
    n = int(raw.strip())
    return n if n > 0 else default


def _parse_sort(raw: Optional[str]) -> SortSpec:
    if not raw:
        return SortSpec()
    field, _, direction = raw.partition(":")
    field = field.strip()
    if not field:
        return SortSpec()
    return SortSpec(
        field=field,
        direction=SortDirection.ASC if direction == "asc" else SortDirection.DESC,
    )


def build_query_spec(params: Mapping[str, Any], max_limit: Optional[int] = None) -> QuerySpec:
    """Never raises: unreadable params fall back to defaults or no constraint."""
    limit = _positive_int(params.get("limit"), DEFAULT_LIMIT)
    if max_limit:
        limit = min(limit, max_limit)
    limit = min(limit, MAX_INT64)
    # keep (page - 1) * limit inside int64
    page = min(_positive_int(params.get("page"), DEFAULT_PAGE), MAX_INT64 // limit + 1)

    numeric: Dict[str, NumericPredicate] = {}
    for name in NUMERIC_FILTER_FIELDS:
        pred = parse_numeric_filter(params.get(name))
        if pred is not None:
            numeric[name] = pred

    return QuerySpec(
        page=page,
        limit=limit,
        sort=_parse_sort(params.get("sort")),
        title=params.get("title") or None,
        cuisine=params.get("cuisine") or None,
        numeric_filters=tuple(numeric.items()),
        calories=parse_numeric_filter(params.get("calories")),
    )
