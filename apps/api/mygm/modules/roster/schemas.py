from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field

Gender = Literal["Male", "Female"]
Alignment = Literal["Face", "Heel"]


class WrestlerCreateIn(BaseModel):
    name: str = Field(min_length=1)
    gender: Gender
    alignment: Alignment
    ring_level: int = Field(default=50, ge=0, le=100)
    mic: int = Field(default=50, ge=0, le=100)
    main_class: str = "Fighter"
    alt_class: str = "None"
    is_permanent: bool = False
    weeks_remaining: int = 25
    salary: float = Field(default=0.0, ge=0)
    image_ref: Optional[str] = None


class WrestlerPatchIn(BaseModel):
    name: Optional[str] = None
    gender: Optional[Gender] = None
    alignment: Optional[Alignment] = None
    ring_level: Optional[int] = Field(default=None, ge=0, le=100)
    mic: Optional[int] = Field(default=None, ge=0, le=100)
    main_class: Optional[str] = None
    alt_class: Optional[str] = None
    is_permanent: Optional[bool] = None
    weeks_remaining: Optional[int] = None
    salary: Optional[float] = Field(default=None, ge=0)
    image_ref: Optional[str] = None


class WrestlerOut(BaseModel):
    id: int
    save_id: int
    name: str
    gender: Gender
    alignment: Alignment
    ring_level: int
    mic: int
    main_class: str
    alt_class: str
    is_permanent: bool
    weeks_remaining: int
    salary: float
    wins: int
    losses: int
    image_ref: Optional[str] = None
    is_expired: bool
    is_expiring: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class WrestlersListOut(BaseModel):
    items: List[WrestlerOut]


class RenewIn(BaseModel):
    weeks: int
    cost: float = 0.0


class WrestlerDeletedOut(BaseModel):
    id: int
    deleted: bool
    vacated_title_ids: List[int] = Field(default_factory=list)
