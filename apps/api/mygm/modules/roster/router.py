from __future__ import annotations

from fastapi import APIRouter, Path, Query

from .schemas import (
    RenewIn,
    WrestlerCreateIn,
    WrestlerDeletedOut,
    WrestlerOut,
    WrestlerPatchIn,
    WrestlersListOut,
)
from .service import (
    add_wrestler,
    delete_wrestler,
    get_wrestler,
    list_wrestlers,
    renew_contract,
    update_wrestler,
)

router = APIRouter(tags=["roster"])


@router.get("/saves/{save_id}/wrestlers", response_model=WrestlersListOut)
def api_list_wrestlers(
    save_id: int = Path(...),
    bookable_only: bool = Query(False, description="hide expired contracts"),
) -> WrestlersListOut:
    items = list_wrestlers(save_id, bookable_only=bookable_only)
    return WrestlersListOut(items=[WrestlerOut(**w) for w in items])


@router.post("/saves/{save_id}/wrestlers", response_model=WrestlerOut)
def api_add_wrestler(body: WrestlerCreateIn, save_id: int = Path(...)) -> WrestlerOut:
    return WrestlerOut(**add_wrestler(save_id, **body.model_dump()))


@router.get("/saves/{save_id}/wrestlers/{wrestler_id}", response_model=WrestlerOut)
def api_get_wrestler(save_id: int = Path(...), wrestler_id: int = Path(...)) -> WrestlerOut:
    return WrestlerOut(**get_wrestler(save_id, wrestler_id))


@router.patch("/saves/{save_id}/wrestlers/{wrestler_id}", response_model=WrestlerOut)
def api_update_wrestler(body: WrestlerPatchIn, save_id: int = Path(...), wrestler_id: int = Path(...)) -> WrestlerOut:
    patch = body.model_dump(exclude_unset=True)
    return WrestlerOut(**update_wrestler(save_id, wrestler_id, patch))


@router.delete("/saves/{save_id}/wrestlers/{wrestler_id}", response_model=WrestlerDeletedOut)
def api_delete_wrestler(save_id: int = Path(...), wrestler_id: int = Path(...)) -> WrestlerDeletedOut:
    return WrestlerDeletedOut(**delete_wrestler(save_id, wrestler_id))


@router.post("/saves/{save_id}/wrestlers/{wrestler_id}/renew", response_model=WrestlerOut)
def api_renew_contract(body: RenewIn, save_id: int = Path(...), wrestler_id: int = Path(...)) -> WrestlerOut:
    return WrestlerOut(**renew_contract(save_id, wrestler_id, cost=body.cost, weeks=body.weeks))
