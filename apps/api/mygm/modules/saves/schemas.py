from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class SaveCreateIn(BaseModel):
    name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    theme_color: Optional[str] = None
    starting_cash: Optional[float] = Field(default=None, ge=0)


class SaveOut(BaseModel):
    id: int
    name: str
    brand: str
    theme_color: str
    current_week: int
    current_cash: float
    created_at: Optional[str] = None


class SavesListOut(BaseModel):
    items: List[SaveOut]


class DeletedOut(BaseModel):
    id: int
    deleted: bool
