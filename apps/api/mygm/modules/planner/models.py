from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class PlannedMatch(SQLModel, table=True):
    __tablename__ = "planned_matches"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    week: int
    match_type: str
    stipulation: str = Field(default="Normal")
    cost: float = Field(default=0.0)
    is_title_match: int = Field(default=0)
    title_id: Optional[int] = Field(default=None, foreign_key="titles.id")
    is_completed: int = Field(default=0)  # 0 -> 1 only, via resolution
    result_text: Optional[str] = Field(default=None)
    sort_order: int = Field(default=0)

    created_at: str
    updated_at: str


class PlannedMatchParticipant(SQLModel, table=True):
    __tablename__ = "planned_match_participants"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="planned_matches.id")
    team_index: int
    slot: int
    wrestler_id: int
