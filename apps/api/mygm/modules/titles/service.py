from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Sequence

from mygm.core.audit import emit, now_iso
from mygm.core.db import insert, read_conn, write_tx
from mygm.core.errors import NotFound, ValidationError
from mygm.modules.saves.service import load_save

CATEGORY_TAG = "Tag"
CATEGORY_MITB = "MITB"

UNKNOWN_NAME = "Unknown"

OUTCOME_CHANGE = "change"
OUTCOME_RETAIN = "retain"


def load_title(conn: sqlite3.Connection, save_id: int, title_id: int) -> sqlite3.Row:
    row = conn.execute("SELECT * FROM titles WHERE id=? AND save_id=?;", (title_id, save_id)).fetchone()
    if not row:
        raise NotFound("title not found", details={"save_id": save_id, "title_id": title_id})
    return row


def holders_of(title: sqlite3.Row) -> List[int]:
    return [int(h) for h in (title["holder1_id"], title["holder2_id"]) if h is not None]


def names_by_id(conn: sqlite3.Connection, ids: Sequence[Optional[int]]) -> Dict[int, str]:
    wanted = [int(i) for i in ids if i is not None]
    if not wanted:
        return {}
    rows = conn.execute(
        f"SELECT id, name FROM wrestlers WHERE id IN ({','.join(['?'] * len(wanted))});",
        wanted,
    ).fetchall()
    return {int(r["id"]): str(r["name"]) for r in rows}


def title_outcome(holders: Sequence[int], winning_team: Sequence[int]) -> Optional[str]:
    """None means the holders are split across sides."""
    held = set(holders)
    winners = set(winning_team)
    if not held:
        return OUTCOME_CHANGE
    if held <= winners:
        return OUTCOME_RETAIN
    if not (held & winners):
        return OUTCOME_CHANGE
    return None


# -------------------------
# reign bookkeeping (shared with resolution + roster)
# -------------------------
def close_reign(
    conn: sqlite3.Connection,
    title: sqlite3.Row,
    week_lost: int,
    defeated_by: Sequence[int] = (),
) -> Optional[int]:
    """Move the active reign into history; no-op for a vacant title.

    An empty defeated_by records an unknown defeater (manual change). A reign
    that ends in the week it began is overwritten without a history row, so
    every stored reign has week_lost > week_won.
    """
    if title["holder1_id"] is None:
        return None
    if int(week_lost) <= int(title["week_won"]):
        return None
    d1 = defeated_by[0] if len(defeated_by) > 0 else None
    d2 = defeated_by[1] if len(defeated_by) > 1 else None
    return insert(
        conn,
        "title_reigns",
        {
            "save_id": int(title["save_id"]),
            "title_id": int(title["id"]),
            "holder1_id": int(title["holder1_id"]),
            "holder2_id": title["holder2_id"],
            "week_won": int(title["week_won"]),
            "week_lost": int(week_lost),
            "defeated_by1_id": d1,
            "defeated_by2_id": d2,
            "created_at": now_iso(),
        },
    )


def set_holders(conn: sqlite3.Connection, title_id: int, holder1: Optional[int], holder2: Optional[int], week: int) -> None:
    conn.execute(
        "UPDATE titles SET holder1_id=?, holder2_id=?, week_won=? WHERE id=?;",
        (holder1, holder2, week, title_id),
    )


def record_defense(conn: sqlite3.Connection, title: sqlite3.Row, week: int, rating: int) -> int:
    return insert(
        conn,
        "title_defenses",
        {
            "save_id": int(title["save_id"]),
            "title_id": int(title["id"]),
            "holder1_id": int(title["holder1_id"]),
            "holder2_id": title["holder2_id"],
            "week": int(week),
            "rating": int(rating),
            "created_at": now_iso(),
        },
    )


def _current_defenses(conn: sqlite3.Connection, title: sqlite3.Row) -> int:
    if title["holder1_id"] is None:
        return 0
    row = conn.execute(
        "SELECT COUNT(1) AS n FROM title_defenses WHERE title_id=? AND holder1_id=? AND week>=?;",
        (title["id"], title["holder1_id"], title["week_won"]),
    ).fetchone()
    return int(row["n"])


def _row_to_title(conn: sqlite3.Connection, row: sqlite3.Row, current_week: int) -> Dict[str, Any]:
    d = dict(row)
    names = names_by_id(conn, [d["holder1_id"], d["holder2_id"]])
    d["holder1_name"] = names.get(d["holder1_id"]) if d["holder1_id"] is not None else None
    d["holder2_name"] = names.get(d["holder2_id"]) if d["holder2_id"] is not None else None
    d["is_vacant"] = d["holder1_id"] is None
    d["weeks_held"] = 0 if d["is_vacant"] else max(current_week - int(d["week_won"]), 0)
    return d


# -------------------------
# reads
# -------------------------
def list_titles(save_id: int) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        save = load_save(conn, save_id)
        rows = conn.execute("SELECT * FROM titles WHERE save_id=? ORDER BY id ASC;", (save_id,)).fetchall()
        return [_row_to_title(conn, r, int(save["current_week"])) for r in rows]


def get_title_history(save_id: int, title_id: int) -> Dict[str, Any]:
    with read_conn() as conn:
        save = load_save(conn, save_id)
        title = load_title(conn, save_id, title_id)
        rows = conn.execute(
            "SELECT * FROM title_reigns WHERE title_id=? ORDER BY week_lost DESC, id DESC;",
            (title_id,),
        ).fetchall()

        ids: List[Optional[int]] = []
        for r in rows:
            ids.extend([r["holder1_id"], r["holder2_id"], r["defeated_by1_id"], r["defeated_by2_id"]])
        names = names_by_id(conn, ids)

        def name(wid: Optional[int]) -> Optional[str]:
            if wid is None:
                return None
            return names.get(int(wid), UNKNOWN_NAME)

        reigns = []
        for r in rows:
            d = dict(r)
            d["holder1_name"] = name(d["holder1_id"])
            d["holder2_name"] = name(d["holder2_id"])
            d["defeated_by1_name"] = name(d["defeated_by1_id"])
            d["defeated_by2_name"] = name(d["defeated_by2_id"])
            d["weeks_held"] = int(d["week_lost"]) - int(d["week_won"])
            reigns.append(d)

        current = _row_to_title(conn, title, int(save["current_week"]))
        current["defenses"] = _current_defenses(conn, title)
        return {"title": current, "reigns": reigns}


# -------------------------
# manual coronation
# -------------------------
def assign_title_with_history(
    save_id: int,
    title_id: int,
    holder1: Optional[int],
    holder2: Optional[int] = None,
) -> Dict[str, Any]:
    """GM override: crown new holder(s), or vacate with holder1=None."""
    if holder1 is None and holder2 is not None:
        raise ValidationError("holder2 requires holder1")
    if holder1 is not None and holder1 == holder2:
        raise ValidationError("holders must be two different wrestlers")

    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        title = load_title(conn, save_id, title_id)

        if holder2 is not None and title["category"] != CATEGORY_TAG:
            raise ValidationError("only tag titles have a second holder", code="invalid_title")
        for wid in (holder1, holder2):
            if wid is None:
                continue
            w = conn.execute("SELECT id FROM wrestlers WHERE id=? AND save_id=?;", (wid, save_id)).fetchone()
            if not w:
                raise NotFound("wrestler not found", details={"wrestler_id": wid})

        same = title["holder1_id"] == holder1 and title["holder2_id"] == holder2
        if not same:
            close_reign(conn, title, week_lost=week)
            set_holders(conn, title_id, holder1, holder2, week if holder1 is not None else int(title["week_won"]))

        out = _row_to_title(conn, load_title(conn, save_id, title_id), week)

    if not same:
        emit("INFO", "title.assigned", "title assigned", save_id=save_id, title_id=title_id, holder1_id=holder1, holder2_id=holder2, week=week)
    return out
