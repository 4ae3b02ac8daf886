from __future__ import annotations

from fastapi import APIRouter, Path

from mygm.modules.saves.service import get_save

from .schemas import (
    MatchDeletedOut,
    PlannedMatchCreateIn,
    PlannedMatchOut,
    PlannedMatchPatchIn,
    ReorderIn,
    ShowCostOut,
    ShowOut,
)
from .service import (
    add_planned_match,
    delete_planned_match,
    get_current_show_cost,
    list_planned_matches,
    reorder_matches,
    update_planned_match,
)

router = APIRouter(tags=["planner"])


@router.get("/saves/{save_id}/show", response_model=ShowOut)
def api_get_show(save_id: int = Path(...)) -> ShowOut:
    items = list_planned_matches(save_id)
    week = int(get_save(save_id)["current_week"])
    return ShowOut(
        week=week,
        items=[PlannedMatchOut(**m) for m in items],
        total_cost=sum(float(m["cost"]) for m in items),
    )


@router.get("/saves/{save_id}/show/cost", response_model=ShowCostOut)
def api_show_cost(save_id: int = Path(...)) -> ShowCostOut:
    return ShowCostOut(save_id=save_id, cost=get_current_show_cost(save_id))


@router.post("/saves/{save_id}/show/matches", response_model=PlannedMatchOut)
def api_add_match(body: PlannedMatchCreateIn, save_id: int = Path(...)) -> PlannedMatchOut:
    m = add_planned_match(save_id, **body.model_dump())
    return PlannedMatchOut(**m)


@router.patch("/saves/{save_id}/show/matches/{match_id}", response_model=PlannedMatchOut)
def api_update_match(body: PlannedMatchPatchIn, save_id: int = Path(...), match_id: int = Path(...)) -> PlannedMatchOut:
    m = update_planned_match(save_id, match_id, body.model_dump(exclude_unset=True))
    return PlannedMatchOut(**m)


@router.delete("/saves/{save_id}/show/matches/{match_id}", response_model=MatchDeletedOut)
def api_delete_match(save_id: int = Path(...), match_id: int = Path(...)) -> MatchDeletedOut:
    return MatchDeletedOut(**delete_planned_match(save_id, match_id))


@router.put("/saves/{save_id}/show/order", response_model=ShowOut)
def api_reorder(body: ReorderIn, save_id: int = Path(...)) -> ShowOut:
    items = reorder_matches(save_id, body.match_ids)
    week = int(get_save(save_id)["current_week"])
    return ShowOut(
        week=week,
        items=[PlannedMatchOut(**m) for m in items],
        total_cost=sum(float(m["cost"]) for m in items),
    )
