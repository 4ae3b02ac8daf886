from __future__ import annotations

from fastapi import APIRouter, Path, Query

from .schemas import (
    RivalriesListOut,
    RivalryCreateIn,
    RivalryDeletedOut,
    RivalryEscalationOut,
    RivalryHistoryOut,
    RivalryOut,
    RivalryPairIn,
)
from .service import (
    create_rivalry,
    delete_rivalry,
    end_rivalry,
    get_rivalry_matches,
    list_rivalries,
    start_or_level_up_rivalry,
)

router = APIRouter(tags=["rivalries"])


@router.get("/saves/{save_id}/rivalries", response_model=RivalriesListOut)
def api_list_rivalries(
    save_id: int = Path(...),
    active: bool = Query(True, description="false lists ended rivalries"),
) -> RivalriesListOut:
    return RivalriesListOut(items=[RivalryOut(**r) for r in list_rivalries(save_id, active=active)])


@router.post("/saves/{save_id}/rivalries", response_model=RivalryOut)
def api_create_rivalry(body: RivalryCreateIn, save_id: int = Path(...)) -> RivalryOut:
    return RivalryOut(**create_rivalry(save_id, body.wrestler1_id, body.wrestler2_id, level=body.level))


@router.post("/saves/{save_id}/rivalries/escalate", response_model=RivalryEscalationOut)
def api_escalate_rivalry(body: RivalryPairIn, save_id: int = Path(...)) -> RivalryEscalationOut:
    return RivalryEscalationOut(**start_or_level_up_rivalry(save_id, body.wrestler1_id, body.wrestler2_id))


@router.post("/saves/{save_id}/rivalries/{rivalry_id}/end", response_model=RivalryOut)
def api_end_rivalry(save_id: int = Path(...), rivalry_id: int = Path(...)) -> RivalryOut:
    return RivalryOut(**end_rivalry(save_id, rivalry_id))


@router.delete("/saves/{save_id}/rivalries/{rivalry_id}", response_model=RivalryDeletedOut)
def api_delete_rivalry(save_id: int = Path(...), rivalry_id: int = Path(...)) -> RivalryDeletedOut:
    return RivalryDeletedOut(**delete_rivalry(save_id, rivalry_id))


@router.get("/saves/{save_id}/rivalries/{rivalry_id}/matches", response_model=RivalryHistoryOut)
def api_rivalry_matches(save_id: int = Path(...), rivalry_id: int = Path(...)) -> RivalryHistoryOut:
    return RivalryHistoryOut(**get_rivalry_matches(save_id, rivalry_id))
