from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class RivalryCreateIn(BaseModel):
    wrestler1_id: int
    wrestler2_id: int
    level: int = Field(default=1, ge=1, le=4)


class RivalryPairIn(BaseModel):
    wrestler1_id: int
    wrestler2_id: int


class RivalryOut(BaseModel):
    id: int
    save_id: int
    wrestler1_id: int
    wrestler2_id: int
    wrestler1_name: str
    wrestler2_name: str
    level: int
    is_active: bool
    started_week: int
    ended_week: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class RivalriesListOut(BaseModel):
    items: List[RivalryOut]


class RivalryEscalationOut(BaseModel):
    action: Literal["started", "leveled_up", "max_level"]
    new_level: int
    rivalry: RivalryOut


class RivalryMatchOut(BaseModel):
    id: int
    week: int
    match_type: str
    winner_id: int
    winner_name: str
    loser_name: str
    rating: int
    is_title_change: bool
    title_name: Optional[str] = None
    rival_winner_id: Optional[int] = None


class RivalryHistoryOut(BaseModel):
    rivalry: RivalryOut
    wrestler1_wins: int
    wrestler2_wins: int
    matches: List[RivalryMatchOut]


class RivalryDeletedOut(BaseModel):
    id: int
    deleted: bool
