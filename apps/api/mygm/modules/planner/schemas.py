from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class PlannedMatchCreateIn(BaseModel):
    match_type: str = Field(min_length=1, description="format name, or 'Promo: <name>'")
    participants_by_team: Dict[int, List[int]]
    stipulation: str = "Normal"
    cost: float = Field(default=0.0, ge=0)
    is_title_match: bool = False
    title_id: Optional[int] = None


class PlannedMatchPatchIn(BaseModel):
    match_type: Optional[str] = None
    participants_by_team: Optional[Dict[int, List[int]]] = None
    stipulation: Optional[str] = None
    cost: Optional[float] = Field(default=None, ge=0)
    is_title_match: Optional[bool] = None
    title_id: Optional[int] = None


class ParticipantOut(BaseModel):
    team_index: int
    slot: int
    wrestler_id: int
    name: Optional[str] = None


class PlannedMatchOut(BaseModel):
    id: int
    save_id: int
    week: int
    match_type: str
    is_promo: bool
    participants_by_team: Dict[int, List[int]]
    participants: List[ParticipantOut]
    stipulation: str
    cost: float
    is_title_match: bool
    title_id: Optional[int] = None
    title_name: Optional[str] = None
    is_completed: bool
    result_text: Optional[str] = None
    sort_order: int


class ShowOut(BaseModel):
    week: int
    items: List[PlannedMatchOut]
    total_cost: float


class ShowCostOut(BaseModel):
    save_id: int
    cost: float


class ReorderIn(BaseModel):
    match_ids: List[int]


class MatchDeletedOut(BaseModel):
    id: int
    deleted: bool
