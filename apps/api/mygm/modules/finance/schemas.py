from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

Kind = Literal["IN", "OUT"]


class ManualTransactionIn(BaseModel):
    kind: Kind
    amount: float = Field(gt=0)
    category: str = Field(min_length=1)
    description: str = ""


class FinanceEntryOut(BaseModel):
    id: int
    save_id: int
    week: int
    category: str
    description: str
    amount: float
    kind: Kind
    created_at: Optional[str] = None


class ManualTransactionOut(FinanceEntryOut):
    current_cash: float


class TransactionsListOut(BaseModel):
    items: List[FinanceEntryOut]


class CurrentWeekFinancesOut(BaseModel):
    week: int
    income: float
    expenses: float
    net: float
    show_cost: float
    current_cash: float


class IncomeBreakdownIn(BaseModel):
    network: float = Field(default=0.0, ge=0)
    tickets: float = Field(default=0.0, ge=0)
    ads: float = Field(default=0.0, ge=0)
    promos: float = Field(default=0.0, ge=0)
    other: float = Field(default=0.0, ge=0)
    event_name: Optional[str] = None


class WeekClosedOut(BaseModel):
    save_id: int
    closed_week: int
    total_income: float
    total_expenses: float
    avg_rating: float
    current_week: int
    current_cash: float


class WeeklySummaryOut(BaseModel):
    id: int
    week: int
    event_name: str
    avg_rating: float
    total_income: float
    total_expenses: float
    created_at: Optional[str] = None


class WeeklySummariesOut(BaseModel):
    items: List[WeeklySummaryOut]


class LogParticipantsOut(BaseModel):
    winner: List[int]
    losers: List[int]


class MatchLogOut(BaseModel):
    id: int
    week: int
    match_type: str
    winner_id: int
    winner_name: str
    loser_name: str
    rating: int
    is_title_change: bool
    title_id: Optional[int] = None
    title_name: Optional[str] = None
    planned_match_id: Optional[int] = None
    participants: LogParticipantsOut
    created_at: Optional[str] = None


class MatchLogListOut(BaseModel):
    week: int
    items: List[MatchLogOut]
