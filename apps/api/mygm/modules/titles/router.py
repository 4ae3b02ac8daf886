from __future__ import annotations

from fastapi import APIRouter, Path

from .schemas import TitleAssignIn, TitleHistoryOut, TitleOut, TitlesListOut
from .service import assign_title_with_history, get_title_history, list_titles

router = APIRouter(tags=["titles"])


@router.get("/saves/{save_id}/titles", response_model=TitlesListOut)
def api_list_titles(save_id: int = Path(...)) -> TitlesListOut:
    return TitlesListOut(items=[TitleOut(**t) for t in list_titles(save_id)])


@router.get("/saves/{save_id}/titles/{title_id}/history", response_model=TitleHistoryOut)
def api_title_history(save_id: int = Path(...), title_id: int = Path(...)) -> TitleHistoryOut:
    return TitleHistoryOut(**get_title_history(save_id, title_id))


@router.post("/saves/{save_id}/titles/{title_id}/assign", response_model=TitleOut)
def api_assign_title(body: TitleAssignIn, save_id: int = Path(...), title_id: int = Path(...)) -> TitleOut:
    t = assign_title_with_history(save_id, title_id, holder1=body.holder1_id, holder2=body.holder2_id)
    return TitleOut(**t)
