from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel

TitleCategory = Literal["World", "Midcard", "Tag", "MITB"]


class TitleOut(BaseModel):
    id: int
    save_id: int
    name: str
    category: TitleCategory
    gender: str
    holder1_id: Optional[int] = None
    holder2_id: Optional[int] = None
    holder1_name: Optional[str] = None
    holder2_name: Optional[str] = None
    week_won: int
    weeks_held: int
    is_vacant: bool
    image_ref: Optional[str] = None


class TitlesListOut(BaseModel):
    items: List[TitleOut]


class CurrentReignOut(TitleOut):
    defenses: int = 0


class TitleReignOut(BaseModel):
    id: int
    title_id: int
    holder1_id: int
    holder2_id: Optional[int] = None
    holder1_name: Optional[str] = None
    holder2_name: Optional[str] = None
    week_won: int
    week_lost: int
    weeks_held: int
    defeated_by1_id: Optional[int] = None
    defeated_by2_id: Optional[int] = None
    defeated_by1_name: Optional[str] = None
    defeated_by2_name: Optional[str] = None
    created_at: Optional[str] = None


class TitleHistoryOut(BaseModel):
    title: CurrentReignOut
    reigns: List[TitleReignOut]


class TitleAssignIn(BaseModel):
    holder1_id: Optional[int] = None
    holder2_id: Optional[int] = None
