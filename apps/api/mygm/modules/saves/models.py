from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# owns every other row (ON DELETE CASCADE in migration)
class Save(SQLModel, table=True):
    __tablename__ = "saves"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    brand: str
    theme_color: str
    current_week: int = Field(default=1)  # >= 1; mutated only by week closure
    current_cash: float = Field(default=0.0)

    created_at: str
