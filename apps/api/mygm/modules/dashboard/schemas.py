from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel


class StreakOut(BaseModel):
    id: int
    name: str
    image_ref: Optional[str] = None
    count: int


class MilestoneOut(BaseModel):
    title_id: int
    title: str
    champion: str
    days: int
    status: Literal["golden", "danger", "normal"]


class FinancePointOut(BaseModel):
    week: int
    income: float
    expenses: float
    profit: float


class NewsItemOut(BaseModel):
    type: str
    text: str
    subtext: str
    data: Optional[List[Dict[str, Any]]] = None


class LastShowOut(BaseModel):
    week: int
    avg_rating: float
    total_income: float


class DashboardOut(BaseModel):
    save_id: int
    current_week: int
    save_name: str
    brand: str
    hot_streaks: List[StreakOut]
    milestones: List[MilestoneOut]
    finances: List[FinancePointOut]
    news: List[NewsItemOut]
    expiring_contracts: int
    last_show: Optional[LastShowOut] = None
