from __future__ import annotations

from fastapi import APIRouter, Path

from .schemas import DeletedOut, SaveCreateIn, SaveOut, SavesListOut
from .service import create_save, delete_save, get_save, list_saves

router = APIRouter(tags=["saves"])


@router.get("/saves", response_model=SavesListOut)
def api_list_saves() -> SavesListOut:
    return SavesListOut(items=[SaveOut(**s) for s in list_saves()])


@router.post("/saves", response_model=SaveOut)
def api_create_save(body: SaveCreateIn) -> SaveOut:
    s = create_save(name=body.name, brand=body.brand, theme_color=body.theme_color, cash=body.starting_cash)
    return SaveOut(**s)


@router.get("/saves/{save_id}", response_model=SaveOut)
def api_get_save(save_id: int = Path(...)) -> SaveOut:
    return SaveOut(**get_save(save_id))


@router.delete("/saves/{save_id}", response_model=DeletedOut)
def api_delete_save(save_id: int = Path(...)) -> DeletedOut:
    return DeletedOut(**delete_save(save_id))
