from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


class Wrestler(SQLModel, table=True):
    __tablename__ = "wrestlers"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id", index=True)
    name: str
    gender: str  # Male|Female
    alignment: str  # Face|Heel
    ring_level: int
    mic: int
    main_class: str
    alt_class: str = Field(default="None")

    # weeks_remaining is ignored while is_permanent=1
    is_permanent: int = Field(default=0)
    weeks_remaining: int = Field(default=25)
    salary: float = Field(default=0.0)

    wins: int = Field(default=0)
    losses: int = Field(default=0)
    image_ref: Optional[str] = Field(default=None)

    created_at: str
    updated_at: str
