"""
Dashboard aggregator: a read-only projection recomputed on every call.

Inputs are the permanent match log, the titles, the roster, the ledger and the
save's current week. Nothing here writes, so two calls with no write in
between return the same payload.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlmodel import Session, select

from mygm.core.db import get_engine
from mygm.core.errors import NotFound
from mygm.modules.finance.models import FinanceEntry, WeeklySummary
from mygm.modules.resolution.models import MatchLogEntry, MatchLogParticipant
from mygm.modules.roster.models import Wrestler
from mygm.modules.saves.models import Save
from mygm.modules.titles.models import Title

MOMENTUM_MIN = 3
MOMENTUM_TOP = 10
HOT_STREAK_NEWS = 4
COLD_STREAK_NEWS = -3
GOLDEN_DAYS = 100
DANGER_DAYS = (25, 30)  # exclusive bounds
FINANCE_WEEKS = 4
EXPIRING_WITHIN = 4

NEWS_PRIORITY = {
    "TITLE_CHANGE": 1,
    "STREAK_BROKEN": 2,
    "UPSET": 3,
    "TITLE_RETAIN": 4,
    "GROUP_BAD_STREAK": 5,
    "BAD_STREAK": 6,
    "GROUP_STREAK": 7,
    "STREAK": 8,
    "FINANCE_BAD": 9,
    "INFO": 10,
}

# (log id, week, winners, losers)
Result = Tuple[int, int, Tuple[int, ...], Tuple[int, ...]]


# -------------------------
# pure folds
# -------------------------
def compute_streaks(results: Iterable[Result], seed_ids: Iterable[int] = ()) -> Dict[int, int]:
    """Signed streak per wrestler; a result change flips sign, never passing 0."""
    streaks: Dict[int, int] = {int(i): 0 for i in seed_ids}
    for _log_id, _week, winners, losers in sorted(results, key=lambda r: r[0]):
        for wid in winners:
            prev = streaks.get(wid, 0)
            streaks[wid] = prev + 1 if prev > 0 else 1
        for wid in losers:
            prev = streaks.get(wid, 0)
            streaks[wid] = prev - 1 if prev < 0 else -1
    return streaks


def milestone_status(days: int) -> str:
    if days >= GOLDEN_DAYS:
        return "golden"
    if DANGER_DAYS[0] < days < DANGER_DAYS[1]:
        return "danger"
    return "normal"


def momentum(streaks: Dict[int, int], roster: Dict[int, Wrestler]) -> List[Dict[str, Any]]:
    items = [
        {"id": wid, "name": roster[wid].name, "image_ref": roster[wid].image_ref, "count": count}
        for wid, count in sorted(streaks.items())
        if wid in roster and abs(count) >= MOMENTUM_MIN
    ]
    items.sort(key=lambda x: abs(x["count"]), reverse=True)
    return items[:MOMENTUM_TOP]


def _item(kind: str, text: str, subtext: str, data: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"type": kind, "text": text, "subtext": subtext, "data": data}


def build_news(
    last_week_logs: Sequence[MatchLogEntry],
    last_week_results: Sequence[Result],
    old_streaks: Dict[int, int],
    momentum_list: List[Dict[str, Any]],
    last_week_profit: Optional[float],
    names: Dict[int, str],
) -> List[Dict[str, Any]]:
    news: List[Dict[str, Any]] = []

    for _log_id, _week, winners, losers in last_week_results:
        for wid in winners:
            prev = old_streaks.get(wid, 0)
            if prev <= -MOMENTUM_MIN:
                news.append(_item("STREAK_BROKEN", "REDEMPTION!", f"{names.get(wid, 'Wrestler')} snapped a {abs(prev)} match losing streak."))
        for wid in losers:
            prev = old_streaks.get(wid, 0)
            if prev >= MOMENTUM_MIN:
                news.append(_item("UPSET", "UPSET ALERT", f"{names.get(wid, 'Wrestler')} lost after {prev} consecutive wins."))

    for log in last_week_logs:
        if log.title_name is None:
            continue
        winner = log.winner_name or "Champion"
        if log.is_title_change:
            news.append(_item("TITLE_CHANGE", "NEW CHAMPION!", f"{winner} has captured the {log.title_name}."))
        else:
            news.append(_item("TITLE_RETAIN", "AND STILL...", f"{winner} successfully retained the {log.title_name}."))

    hot = [m for m in momentum_list if m["count"] >= HOT_STREAK_NEWS]
    if len(hot) == 1:
        news.append(_item("STREAK", f"{hot[0]['name']} ON FIRE", f"Riding a {hot[0]['count']} match winning streak."))
    elif len(hot) > 1:
        news.append(_item("GROUP_STREAK", "MOMENTUM SHIFT", f"{len(hot)} superstars are currently unstoppable.", hot))

    cold = [m for m in momentum_list if m["count"] <= COLD_STREAK_NEWS]
    if len(cold) == 1:
        news.append(_item("BAD_STREAK", "COLD STREAK", f"{cold[0]['name']} has lost {abs(cold[0]['count'])} matches in a row."))
    elif len(cold) > 1:
        news.append(_item("GROUP_BAD_STREAK", "LOSING SKID", f"{len(cold)} superstars are struggling to find a win.", cold))

    if last_week_profit is not None and last_week_profit < 0:
        news.append(_item("FINANCE_BAD", "IN THE RED", "Negative profit last week. Watch your budget."))

    if not news:
        news.append(_item("INFO", "Quiet Week", "Everything set for the next show."))

    # stable: equal priorities keep insertion order
    news.sort(key=lambda n: NEWS_PRIORITY.get(n["type"], 99))
    return news


# -------------------------
# read path
# -------------------------
def _results(session: Session, save_id: int) -> Tuple[List[MatchLogEntry], List[Result]]:
    logs = session.exec(select(MatchLogEntry).where(MatchLogEntry.save_id == save_id).order_by(MatchLogEntry.id)).all()
    parts = session.exec(
        select(MatchLogParticipant)
        .join(MatchLogEntry, MatchLogParticipant.log_id == MatchLogEntry.id)
        .where(MatchLogEntry.save_id == save_id)
        .order_by(MatchLogParticipant.id)
    ).all()
    by_log: Dict[int, Tuple[List[int], List[int]]] = {}
    for p in parts:
        winners, losers = by_log.setdefault(p.log_id, ([], []))
        (winners if p.role == "winner" else losers).append(p.wrestler_id)

    results: List[Result] = []
    for log in logs:
        winners, losers = by_log.get(log.id, ([log.winner_id], []))
        results.append((log.id, log.week, tuple(winners), tuple(losers)))
    return list(logs), results


def _finance_series(session: Session, save_id: int, current_week: int) -> List[Dict[str, Any]]:
    first = max(current_week - (FINANCE_WEEKS - 1), 1)
    rows = session.exec(
        select(FinanceEntry).where(FinanceEntry.save_id == save_id, FinanceEntry.week >= first).order_by(FinanceEntry.id)
    ).all()
    series = {wk: {"week": wk, "income": 0.0, "expenses": 0.0, "profit": 0.0} for wk in range(first, current_week + 1)}
    for f in rows:
        bucket = series.setdefault(f.week, {"week": f.week, "income": 0.0, "expenses": 0.0, "profit": 0.0})
        if f.kind == "IN":
            bucket["income"] += f.amount
        elif f.kind == "OUT":
            bucket["expenses"] += f.amount
    for b in series.values():
        b["profit"] = b["income"] - b["expenses"]
    return [series[wk] for wk in sorted(series)]


def get_dashboard_data(save_id: int) -> Dict[str, Any]:
    with Session(get_engine()) as session:
        save = session.get(Save, save_id)
        if save is None:
            raise NotFound("save not found", details={"save_id": save_id})
        current_week = int(save.current_week)

        wrestlers = session.exec(select(Wrestler).where(Wrestler.save_id == save_id).order_by(Wrestler.id)).all()
        roster = {w.id: w for w in wrestlers}
        names = {w.id: w.name for w in wrestlers}

        logs, results = _results(session, save_id)
        streaks = compute_streaks(results, seed_ids=roster.keys())
        momentum_list = momentum(streaks, roster)

        titles = session.exec(
            select(Title).where(Title.save_id == save_id, Title.holder1_id.is_not(None)).order_by(Title.id)
        ).all()
        milestones = []
        for t in titles:
            days = (current_week - t.week_won) * 7
            champion = " & ".join(names.get(h, "Unknown") for h in (t.holder1_id, t.holder2_id) if h is not None)
            milestones.append({"title_id": t.id, "title": t.name, "champion": champion, "days": days, "status": milestone_status(days)})
        milestones.sort(key=lambda m: m["days"], reverse=True)

        finances = _finance_series(session, save_id, current_week)

        last_show_week = current_week - 1 if current_week > 1 else 1
        last_logs = [log for log in logs if log.week == last_show_week]
        last_results = [r for r in results if r[1] == last_show_week]
        old_streaks = compute_streaks([r for r in results if r[1] < last_show_week], seed_ids=roster.keys())
        last_fin = next((f for f in finances if f["week"] == last_show_week), None)
        news = build_news(
            last_logs,
            last_results,
            old_streaks,
            momentum_list,
            last_fin["profit"] if last_fin else None,
            names,
        )

        expiring = sum(1 for w in wrestlers if not w.is_permanent and 0 < w.weeks_remaining <= EXPIRING_WITHIN)

        summary = session.exec(
            select(WeeklySummary).where(WeeklySummary.save_id == save_id, WeeklySummary.week == last_show_week)
        ).first()
        last_show = None
        if summary is not None:
            last_show = {"week": summary.week, "avg_rating": summary.avg_rating, "total_income": summary.total_income}

        return {
            "save_id": save_id,
            "current_week": current_week,
            "save_name": save.name,
            "brand": save.brand,
            "hot_streaks": momentum_list,
            "milestones": milestones,
            "finances": finances,
            "news": news,
            "expiring_contracts": expiring,
            "last_show": last_show,
        }
