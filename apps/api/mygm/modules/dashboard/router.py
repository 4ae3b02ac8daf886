from __future__ import annotations

from fastapi import APIRouter, Path

from .schemas import DashboardOut
from .service import get_dashboard_data

router = APIRouter(tags=["dashboard"])


@router.get("/saves/{save_id}/dashboard", response_model=DashboardOut)
def api_dashboard(save_id: int = Path(...)) -> DashboardOut:
    return DashboardOut(**get_dashboard_data(save_id))
