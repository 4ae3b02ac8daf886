from __future__ import annotations

from fastapi import APIRouter, Path, Query

from .schemas import (
    CurrentWeekFinancesOut,
    FinanceEntryOut,
    IncomeBreakdownIn,
    ManualTransactionIn,
    ManualTransactionOut,
    MatchLogListOut,
    MatchLogOut,
    TransactionsListOut,
    WeekClosedOut,
    WeeklySummariesOut,
    WeeklySummaryOut,
)
from .service import (
    TRANSACTION_HISTORY_LIMIT,
    add_manual_transaction,
    finalize_week_with_manual_finances,
    get_current_week_finances,
    get_matches_by_week,
    get_transaction_history,
    get_weekly_summaries,
)

router = APIRouter(tags=["finance"])


def _clamp_limit(raw: int | None) -> int:
    if raw is None:
        return TRANSACTION_HISTORY_LIMIT
    try:
        v = int(raw)
    except Exception:
        return TRANSACTION_HISTORY_LIMIT
    if v < 1:
        v = 1
    if v > 200:
        v = 200
    return v


@router.get("/saves/{save_id}/finances", response_model=CurrentWeekFinancesOut)
def api_current_week_finances(save_id: int = Path(...)) -> CurrentWeekFinancesOut:
    return CurrentWeekFinancesOut(**get_current_week_finances(save_id))


@router.get("/saves/{save_id}/finances/transactions", response_model=TransactionsListOut)
def api_transactions(save_id: int = Path(...), limit: int | None = Query(None)) -> TransactionsListOut:
    items = get_transaction_history(save_id, limit=_clamp_limit(limit))
    return TransactionsListOut(items=[FinanceEntryOut(**e) for e in items])


@router.post("/saves/{save_id}/finances/transactions", response_model=ManualTransactionOut)
def api_add_transaction(body: ManualTransactionIn, save_id: int = Path(...)) -> ManualTransactionOut:
    e = add_manual_transaction(
        save_id,
        kind=body.kind,
        amount=body.amount,
        category=body.category,
        description=body.description,
    )
    return ManualTransactionOut(**e)


@router.post("/saves/{save_id}/weeks/close", response_model=WeekClosedOut)
def api_close_week(body: IncomeBreakdownIn, save_id: int = Path(...)) -> WeekClosedOut:
    income = body.model_dump(exclude={"event_name"})
    r = finalize_week_with_manual_finances(save_id, income=income, event_name=body.event_name)
    return WeekClosedOut(**r)


@router.get("/saves/{save_id}/weeks", response_model=WeeklySummariesOut)
def api_weekly_summaries(save_id: int = Path(...)) -> WeeklySummariesOut:
    return WeeklySummariesOut(items=[WeeklySummaryOut(**s) for s in get_weekly_summaries(save_id)])


@router.get("/saves/{save_id}/weeks/{week}/matches", response_model=MatchLogListOut)
def api_matches_by_week(save_id: int = Path(...), week: int = Path(..., ge=1)) -> MatchLogListOut:
    items = get_matches_by_week(save_id, week)
    return MatchLogListOut(week=week, items=[MatchLogOut(**m) for m in items])
