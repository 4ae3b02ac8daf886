from __future__ import annotations

from fastapi import APIRouter, Query

from .schemas import CatalogOut, SegmentCostOut
from .service import get_catalog, segment_cost

router = APIRouter(tags=["catalog"])


@router.get("/catalog", response_model=CatalogOut)
def api_get_catalog() -> CatalogOut:
    return CatalogOut(**get_catalog())


@router.get("/catalog/cost", response_model=SegmentCostOut)
def api_segment_cost(
    match_type: str = Query(..., description="format name, or 'Promo: <name>'"),
    stipulation: str = Query("Normal"),
    interference: bool = Query(False),
) -> SegmentCostOut:
    return SegmentCostOut(
        match_type=match_type,
        stipulation=stipulation,
        interference=interference,
        cost=segment_cost(match_type, stipulation, interference),
    )
