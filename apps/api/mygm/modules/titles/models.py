from __future__ import annotations

from typing import Optional
from sqlmodel import SQLModel, Field


# current reign lives here (holder fields + week_won); vacant => holder1_id is NULL
class Title(SQLModel, table=True):
    __tablename__ = "titles"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id", index=True)
    name: str
    category: str  # World|Midcard|Tag|MITB
    gender: str
    holder1_id: Optional[int] = Field(default=None)
    holder2_id: Optional[int] = Field(default=None)  # Tag only
    week_won: int = Field(default=1)
    image_ref: Optional[str] = Field(default=None)


# append-only: closed reigns only
class TitleReign(SQLModel, table=True):
    __tablename__ = "title_reigns"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    title_id: int = Field(foreign_key="titles.id", index=True)
    holder1_id: int
    holder2_id: Optional[int] = Field(default=None)
    week_won: int
    week_lost: int
    defeated_by1_id: Optional[int] = Field(default=None)  # NULL for manual changes
    defeated_by2_id: Optional[int] = Field(default=None)
    created_at: str


# append-only
class TitleDefense(SQLModel, table=True):
    __tablename__ = "title_defenses"

    id: Optional[int] = Field(default=None, primary_key=True)
    save_id: int = Field(foreign_key="saves.id")
    title_id: int = Field(foreign_key="titles.id", index=True)
    holder1_id: int
    holder2_id: Optional[int] = Field(default=None)
    week: int
    rating: int
    created_at: str
