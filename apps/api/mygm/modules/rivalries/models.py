from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# one row per pair (wrestler1_id < wrestler2_id); ending keeps the row
class Rivalry(SQLModel, table=True):
    __tablename__ = "rivalries"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    wrestler1_id: int = Field(foreign_key="wrestlers.id")
    wrestler2_id: int = Field(foreign_key="wrestlers.id")
    level: int = Field(default=1)  # 1..4
    is_active: int = Field(default=1)
    started_week: int
    ended_week: Optional[int] = Field(default=None)
    created_at: str
    updated_at: str
