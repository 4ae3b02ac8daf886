from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# append-only; the event source for every analytics projection
class MatchLogEntry(SQLModel, table=True):
    __tablename__ = "match_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    week: int
    match_type: str
    winner_id: int
    winner_name: str
    loser_name: str = Field(default="")
    rating: int  # 1..5
    is_title_change: int = Field(default=0)
    title_id: Optional[int] = Field(default=None)
    title_name: Optional[str] = Field(default=None)
    planned_match_id: Optional[int] = Field(default=None)
    created_at: str


# append-only
class MatchLogParticipant(SQLModel, table=True):
    __tablename__ = "match_log_participants"

    id: Optional[int] = Field(default=None, primary_key=True)
    log_id: int = Field(foreign_key="match_log.id", index=True)
    wrestler_id: int
    role: str  # winner|loser
    team_index: int
