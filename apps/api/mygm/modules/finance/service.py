from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from mygm.core.audit import emit, now_iso
from mygm.core.db import insert, read_conn, write_tx
from mygm.core.errors import InvalidState, ValidationError
from mygm.modules.saves.service import load_save

KIND_IN = "IN"
KIND_OUT = "OUT"

SHOW_INCOME = "Show Income"
PRODUCTION = "Production"

# breakdown key -> ledger description
INCOME_SOURCES = (
    ("network", "Network / TV"),
    ("tickets", "Tickets"),
    ("ads", "Advertising"),
    ("promos", "Promotions"),
    ("other", "Other"),
)

TRANSACTION_HISTORY_LIMIT = 50


# -------------------------
# ledger primitives (used inside other modules' transactions)
# -------------------------
def record_entry(
    conn: sqlite3.Connection,
    *,
    save_id: int,
    week: int,
    category: str,
    description: str,
    amount: float,
    kind: str,
) -> int:
    return insert(
        conn,
        "finances",
        {
            "save_id": save_id,
            "week": week,
            "category": category,
            "description": description,
            "amount": float(amount),
            "kind": kind,
            "created_at": now_iso(),
        },
    )


def adjust_cash(conn: sqlite3.Connection, save_id: int, delta: float) -> None:
    conn.execute("UPDATE saves SET current_cash = current_cash + ? WHERE id=?;", (float(delta), save_id))


def _row_to_entry(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


# -------------------------
# manual transactions
# -------------------------
def add_manual_transaction(
    save_id: int,
    kind: str,
    amount: float,
    category: str,
    description: str = "",
) -> Dict[str, Any]:
    kind = (kind or "").upper()
    if kind not in (KIND_IN, KIND_OUT):
        raise ValidationError("kind must be IN or OUT", details={"kind": kind})
    if amount is None or float(amount) <= 0:
        raise ValidationError("amount must be positive", code="invalid_amount", details={"amount": amount})
    if not (category or "").strip():
        raise ValidationError("category is required")

    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        entry_id = record_entry(
            conn,
            save_id=save_id,
            week=week,
            category=category.strip(),
            description=description or "",
            amount=amount,
            kind=kind,
        )
        adjust_cash(conn, save_id, amount if kind == KIND_IN else -float(amount))
        row = conn.execute("SELECT * FROM finances WHERE id=?;", (entry_id,)).fetchone()
        cash = float(load_save(conn, save_id)["current_cash"])

    emit("INFO", "finance.manual", "manual transaction", save_id=save_id, kind=kind, amount=float(amount), week=week)
    out = _row_to_entry(row)
    out["current_cash"] = cash
    return out


# -------------------------
# week closure
# -------------------------
def finalize_week_with_manual_finances(
    save_id: int,
    income: Optional[Dict[str, float]] = None,
    event_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Settle the current week and advance the calendar, all or nothing.

    Income comes from the GM's breakdown; expenses are the booking costs of
    every card item of the week. Contracts count down afterwards.
    """
    income = income or {}
    breakdown: List[tuple] = []
    for key, label in INCOME_SOURCES:
        value = float(income.get(key) or 0)
        if value < 0:
            raise ValidationError(f"income '{key}' cannot be negative", code="invalid_amount", details={key: value})
        breakdown.append((key, label, value))

    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        cash_before = float(save["current_cash"])

        pending = conn.execute(
            "SELECT id FROM planned_matches WHERE save_id=? AND week=? AND is_completed=0 ORDER BY sort_order ASC;",
            (save_id, week),
        ).fetchall()
        if pending:
            raise InvalidState(
                "every match of the show must be resolved before closing the week",
                code="show_incomplete",
                details={"pending_match_ids": [int(r["id"]) for r in pending]},
            )

        total_income = 0.0
        for _key, label, value in breakdown:
            if value == 0:
                continue
            record_entry(conn, save_id=save_id, week=week, category=SHOW_INCOME, description=label, amount=value, kind=KIND_IN)
            total_income += value

        matches = conn.execute(
            "SELECT match_type, stipulation, cost FROM planned_matches WHERE save_id=? AND week=? ORDER BY sort_order ASC, id ASC;",
            (save_id, week),
        ).fetchall()
        total_expenses = 0.0
        for m in matches:
            cost = float(m["cost"] or 0)
            if cost <= 0:
                continue
            desc = m["match_type"]
            if m["stipulation"] and m["stipulation"] != "Normal":
                desc = f"{desc} ({m['stipulation']})"
            record_entry(conn, save_id=save_id, week=week, category=PRODUCTION, description=desc, amount=cost, kind=KIND_OUT)
            total_expenses += cost

        avg_row = conn.execute(
            "SELECT AVG(rating) AS r FROM match_log WHERE save_id=? AND week=?;",
            (save_id, week),
        ).fetchone()
        avg_rating = float(avg_row["r"]) if avg_row and avg_row["r"] is not None else 0.0

        insert(
            conn,
            "weekly_summaries",
            {
                "save_id": save_id,
                "week": week,
                "event_name": event_name or "Weekly Show",
                "avg_rating": avg_rating,
                "total_income": total_income,
                "total_expenses": total_expenses,
                "created_at": now_iso(),
            },
        )

        conn.execute(
            "UPDATE saves SET current_cash = ?, current_week = current_week + 1 WHERE id=?;",
            (cash_before + total_income - total_expenses, save_id),
        )
        # no floor: expiry is read as weeks_remaining <= 0
        conn.execute(
            "UPDATE wrestlers SET weeks_remaining = weeks_remaining - 1 WHERE save_id=? AND is_permanent=0;",
            (save_id,),
        )
        after = load_save(conn, save_id)

    result = {
        "save_id": save_id,
        "closed_week": week,
        "total_income": total_income,
        "total_expenses": total_expenses,
        "avg_rating": avg_rating,
        "current_week": int(after["current_week"]),
        "current_cash": float(after["current_cash"]),
    }
    emit("INFO", "week.closed", "week closed", **result)
    return result


# -------------------------
# reads
# -------------------------
def get_current_week_finances(save_id: int) -> Dict[str, Any]:
    with read_conn() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        row = conn.execute(
            "SELECT "
            "COALESCE(SUM(CASE WHEN kind='IN' THEN amount ELSE 0 END), 0) AS income, "
            "COALESCE(SUM(CASE WHEN kind='OUT' THEN amount ELSE 0 END), 0) AS expenses "
            "FROM finances WHERE save_id=? AND week=?;",
            (save_id, week),
        ).fetchone()
        cost_row = conn.execute(
            "SELECT COALESCE(SUM(cost), 0) AS c FROM planned_matches WHERE save_id=? AND week=?;",
            (save_id, week),
        ).fetchone()
        income_v = float(row["income"])
        expenses_v = float(row["expenses"])
        return {
            "week": week,
            "income": income_v,
            "expenses": expenses_v,
            "net": income_v - expenses_v,
            "show_cost": float(cost_row["c"]),
            "current_cash": float(save["current_cash"]),
        }


def get_transaction_history(save_id: int, limit: int = TRANSACTION_HISTORY_LIMIT) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        load_save(conn, save_id)
        rows = conn.execute(
            "SELECT * FROM finances WHERE save_id=? ORDER BY id DESC LIMIT ?;",
            (save_id, limit),
        ).fetchall()
        return [_row_to_entry(r) for r in rows]


def get_weekly_summaries(save_id: int) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        load_save(conn, save_id)
        rows = conn.execute(
            "SELECT * FROM weekly_summaries WHERE save_id=? ORDER BY week DESC;",
            (save_id,),
        ).fetchall()
        return [dict(r) for r in rows]


def get_matches_by_week(save_id: int, week: int) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        load_save(conn, save_id)
        rows = conn.execute(
            "SELECT * FROM match_log WHERE save_id=? AND week=? ORDER BY id ASC;",
            (save_id, week),
        ).fetchall()
        out: List[Dict[str, Any]] = []
        for r in rows:
            d = dict(r)
            d["is_title_change"] = bool(d["is_title_change"])
            parts = conn.execute(
                "SELECT wrestler_id, role FROM match_log_participants WHERE log_id=? ORDER BY id ASC;",
                (d["id"],),
            ).fetchall()
            d["participants"] = {
                "winner": [int(p["wrestler_id"]) for p in parts if p["role"] == "winner"],
                "losers": [int(p["wrestler_id"]) for p in parts if p["role"] == "loser"],
            }
            out.append(d)
        return out
