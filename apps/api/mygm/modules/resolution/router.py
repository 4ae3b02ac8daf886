from __future__ import annotations

from fastapi import APIRouter, Path

from .schemas import ResolveIn, ResolveOut
from .service import resolve_match

router = APIRouter(tags=["resolution"])


@router.post("/saves/{save_id}/show/matches/{match_id}/resolve", response_model=ResolveOut)
def api_resolve_match(body: ResolveIn, save_id: int = Path(...), match_id: int = Path(...)) -> ResolveOut:
    r = resolve_match(save_id, match_id, winner_id=body.winner_id, rating=body.rating)
    return ResolveOut(**r)
