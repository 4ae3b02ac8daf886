from __future__ import annotations

from typing import List
from pydantic import BaseModel


class MatchFormatOut(BaseModel):
    id: str
    name: str
    teams: int
    members_per_team: int


class PromoTypeOut(BaseModel):
    id: str
    name: str
    cost: int
    is_vs: bool


class StipulationOut(BaseModel):
    name: str
    cost: int


class BrandOut(BaseModel):
    id: str
    name: str
    color: str


class CatalogOut(BaseModel):
    match_formats: List[MatchFormatOut]
    promo_types: List[PromoTypeOut]
    stipulations: List[StipulationOut]
    interference_cost: int
    brands: List[BrandOut]
    title_categories: List[str]


class SegmentCostOut(BaseModel):
    match_type: str
    stipulation: str
    interference: bool
    cost: int
