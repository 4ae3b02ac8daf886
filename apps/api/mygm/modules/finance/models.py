from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# append-only
class FinanceEntry(SQLModel, table=True):
    __tablename__ = "finances"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    week: int
    category: str
    description: str = Field(default="")
    amount: float  # always positive; sign comes from kind
    kind: str  # IN|OUT
    created_at: str


# written once at week closure
class WeeklySummary(SQLModel, table=True):
    __tablename__ = "weekly_summaries"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    week: int
    event_name: str = Field(default="Weekly Show")
    avg_rating: float = Field(default=0.0)
    total_income: float = Field(default=0.0)
    total_expenses: float = Field(default=0.0)
    created_at: str
