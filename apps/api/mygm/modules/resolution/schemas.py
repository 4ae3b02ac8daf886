from __future__ import annotations

from pydantic import BaseModel, Field


class ResolveIn(BaseModel):
    winner_id: int
    rating: int = Field(ge=1, le=5)


class ResolveOut(BaseModel):
    success: bool
    is_title_change: bool
    match_id: int
    log_id: int
    result_text: str
