# Recipe document schema
# Numeric fields are either a finite number or None; "NaN", "" and junk become None.
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NUMERIC_FIELDS = ("rating", "prep_time", "cook_time", "total_time")

def to_number(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v or v.lower() == "nan":
            return None
    try:
        num = float(v)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None

def normalize_numeric_fields(doc: Dict[str, Any]) -> Dict[str, Any]:
    # raw dict → copy with numeric fields cleaned (bulk loader path)
    out = dict(doc)
    for f in NUMERIC_FIELDS:
        out[f] = to_number(out.get(f))
    return out

def _text_or_none(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v

# null collections read as empty ones
_EMPTY = {"nutrients": dict, "ingredients": list, "instructions": list, "description": str}

def _empty_if_none(v: Any, field: str) -> Any:
    return _EMPTY[field]() if v is None else v

class RecipeIn(BaseModel):
    cuisine: Optional[str] = None
    title: str = Field(..., min_length=1)
    rating: Optional[float] = None
    prep_time: Optional[float] = Field(default=None, ge=0)
    cook_time: Optional[float] = Field(default=None, ge=0)
    total_time: Optional[float] = Field(default=None, ge=0)
    description: str = ""
    nutrients: Dict[str, Any] = Field(default_factory=dict)
    serves: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _v_number(cls, v):
        return to_number(v)

    @field_validator("nutrients", "ingredients", "instructions", "description", mode="before")
    @classmethod
    def _v_empty(cls, v, info):
        return _empty_if_none(v, info.field_name)

    @field_validator("serves", "cuisine", mode="before")
    @classmethod
    def _v_text(cls, v):
        return _text_or_none(v)

class RecipeUpdate(BaseModel):
    # partial body for PUT; only fields the client sent are applied
    cuisine: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=1)
    rating: Optional[float] = None
    prep_time: Optional[float] = Field(default=None, ge=0)
    cook_time: Optional[float] = Field(default=None, ge=0)
    total_time: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    nutrients: Optional[Dict[str, Any]] = None
    serves: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _v_number(cls, v):
        return to_number(v)

    @field_validator("nutrients", "ingredients", "instructions", "description", mode="before")
    @classmethod
    def _v_empty(cls, v, info):
        return _empty_if_none(v, info.field_name)

    @field_validator("serves", "cuisine", mode="before")
    @classmethod
    def _v_text(cls, v):
        return _text_or_none(v)

    @field_validator("title")
    @classmethod
    def _v_title(cls, v):
        if v is None:
            raise ValueError("title cannot be null")
        return v

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)

class RecipeOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    cuisine: Optional[str] = None
    title: str = ""
    rating: Optional[float] = None
    prep_time: Optional[float] = None
    cook_time: Optional[float] = None
    total_time: Optional[float] = None
    description: str = ""
    nutrients: Dict[str, Any] = Field(default_factory=dict)
    serves: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def _v_number(cls, v):
        return to_number(v)

    @field_validator("nutrients", "ingredients", "instructions", "description", mode="before")
    @classmethod
    def _v_empty(cls, v, info):
        return _empty_if_none(v, info.field_name)

    @field_validator("serves", "cuisine", mode="before")
    @classmethod
    def _v_text(cls, v):
        return _text_or_none(v)

    @field_validator("title", mode="before")
    @classmethod
    def _v_blank(cls, v):
        return v or ""

class RecipeListOut(BaseModel):
    page: int
    limit: int
    total: int
    data: List[RecipeOut]

class RecipeSearchOut(BaseModel):
    data: List[RecipeOut]

def to_recipe_out(doc: Dict[str, Any]) -> RecipeOut:
    # Mongo _id(ObjectId) → "id" string
    d = dict(doc)
    rid = d.pop("_id", None)
    d["id"] = str(rid if rid is not None else d.get("id", ""))
    return RecipeOut.model_validate(d)
