"""
Rivalries between two wrestlers of a save.

A pair owns at most one row. Ending a rivalry is a soft end (is_active=0);
starting it again re-activates the same row. Head-to-head history is not
stored here, it is read from the permanent match log.
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional, Tuple

from mygm.core.audit import emit, now_iso
from mygm.core.db import insert, read_conn, write_tx
from mygm.core.errors import NotFound, ValidationError
from mygm.modules.roster.service import load_wrestler
from mygm.modules.saves.service import load_save
from mygm.modules.titles.service import UNKNOWN_NAME, names_by_id

MIN_LEVEL = 1
MAX_LEVEL = 4

ACTION_STARTED = "started"
ACTION_LEVELED_UP = "leveled_up"
ACTION_MAX_LEVEL = "max_level"


def _pair(wrestler1_id: int, wrestler2_id: int) -> Tuple[int, int]:
    a, b = int(wrestler1_id), int(wrestler2_id)
    if a == b:
        raise ValidationError("a rivalry needs two different wrestlers", details={"wrestler_id": a})
    return (a, b) if a < b else (b, a)


def _check_level(level: int) -> int:
    if level is None or not MIN_LEVEL <= int(level) <= MAX_LEVEL:
        raise ValidationError(
            f"level must be between {MIN_LEVEL} and {MAX_LEVEL}",
            code="invalid_level",
            details={"level": level},
        )
    return int(level)


def load_rivalry(conn: sqlite3.Connection, save_id: int, rivalry_id: int) -> sqlite3.Row:
    row = conn.execute("SELECT * FROM rivalries WHERE id=? AND save_id=?;", (rivalry_id, save_id)).fetchone()
    if not row:
        raise NotFound("rivalry not found", details={"save_id": save_id, "rivalry_id": rivalry_id})
    return row


def _find_pair(conn: sqlite3.Connection, save_id: int, pair: Tuple[int, int]) -> Optional[sqlite3.Row]:
    return conn.execute(
        "SELECT * FROM rivalries WHERE save_id=? AND wrestler1_id=? AND wrestler2_id=?;",
        (save_id, pair[0], pair[1]),
    ).fetchone()


def _row_to_rivalry(conn: sqlite3.Connection, row: sqlite3.Row) -> Dict[str, Any]:
    d = dict(row)
    d["is_active"] = bool(d["is_active"])
    names = names_by_id(conn, [d["wrestler1_id"], d["wrestler2_id"]])
    d["wrestler1_name"] = names.get(int(d["wrestler1_id"]), UNKNOWN_NAME)
    d["wrestler2_name"] = names.get(int(d["wrestler2_id"]), UNKNOWN_NAME)
    return d


def _activate(
    conn: sqlite3.Connection,
    save_id: int,
    pair: Tuple[int, int],
    existing: Optional[sqlite3.Row],
    level: int,
    week: int,
) -> int:
    now = now_iso()
    if existing is not None:
        conn.execute(
            "UPDATE rivalries SET is_active=1, level=?, started_week=?, ended_week=NULL, updated_at=? WHERE id=?;",
            (level, week, now, existing["id"]),
        )
        return int(existing["id"])
    return insert(
        conn,
        "rivalries",
        {
            "save_id": save_id,
            "wrestler1_id": pair[0],
            "wrestler2_id": pair[1],
            "level": level,
            "is_active": 1,
            "started_week": week,
            "ended_week": None,
            "created_at": now,
            "updated_at": now,
        },
    )


# -------------------------
# reads
# -------------------------
def list_rivalries(save_id: int, active: bool = True) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        load_save(conn, save_id)
        if active:
            sql = "SELECT * FROM rivalries WHERE save_id=? AND is_active=1 ORDER BY level DESC, started_week ASC, id ASC;"
        else:
            sql = "SELECT * FROM rivalries WHERE save_id=? AND is_active=0 ORDER BY ended_week DESC, id DESC;"
        rows = conn.execute(sql, (save_id,)).fetchall()
        return [_row_to_rivalry(conn, r) for r in rows]


def get_active_rivalries(save_id: int) -> List[Dict[str, Any]]:
    return list_rivalries(save_id, active=True)


def get_inactive_rivalries(save_id: int) -> List[Dict[str, Any]]:
    return list_rivalries(save_id, active=False)


def get_rivalry_matches(save_id: int, rivalry_id: int) -> Dict[str, Any]:
    """Logged matches where the two rivals stood on opposite teams, newest first."""
    with read_conn() as conn:
        rivalry = load_rivalry(conn, save_id, rivalry_id)
        w1, w2 = int(rivalry["wrestler1_id"]), int(rivalry["wrestler2_id"])
        rows = conn.execute(
            "SELECT l.* FROM match_log l "
            "JOIN match_log_participants p1 ON p1.log_id = l.id AND p1.wrestler_id = ? "
            "JOIN match_log_participants p2 ON p2.log_id = l.id AND p2.wrestler_id = ? "
            "WHERE l.save_id=? AND p1.team_index != p2.team_index "
            "ORDER BY l.week DESC, l.id DESC;",
            (w1, w2, save_id),
        ).fetchall()

        matches = []
        wins = {w1: 0, w2: 0}
        for r in rows:
            d = dict(r)
            d["is_title_change"] = bool(d["is_title_change"])
            winners = {
                int(p["wrestler_id"])
                for p in conn.execute(
                    "SELECT wrestler_id FROM match_log_participants WHERE log_id=? AND role='winner';",
                    (r["id"],),
                ).fetchall()
            }
            d["rival_winner_id"] = w1 if w1 in winners else (w2 if w2 in winners else None)
            if d["rival_winner_id"] is not None:
                wins[d["rival_winner_id"]] += 1
            matches.append(d)

        return {
            "rivalry": _row_to_rivalry(conn, rivalry),
            "wrestler1_wins": wins[w1],
            "wrestler2_wins": wins[w2],
            "matches": matches,
        }


# -------------------------
# writes
# -------------------------
def create_rivalry(save_id: int, wrestler1_id: int, wrestler2_id: int, level: int = MIN_LEVEL) -> Dict[str, Any]:
    """Start a rivalry at `level`; an existing pair (active or ended) is reset in place."""
    pair = _pair(wrestler1_id, wrestler2_id)
    level = _check_level(level)

    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        for wid in pair:
            load_wrestler(conn, save_id, wid)
        rivalry_id = _activate(conn, save_id, pair, _find_pair(conn, save_id, pair), level, week)
        out = _row_to_rivalry(conn, load_rivalry(conn, save_id, rivalry_id))

    emit("INFO", "rivalry.started", "rivalry started", save_id=save_id, rivalry_id=rivalry_id, rivalry_level=level, week=week)
    return out


def start_or_level_up_rivalry(save_id: int, wrestler1_id: int, wrestler2_id: int) -> Dict[str, Any]:
    """Escalate an active rivalry by one level (capped), or start it at level 1."""
    pair = _pair(wrestler1_id, wrestler2_id)

    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        for wid in pair:
            load_wrestler(conn, save_id, wid)

        existing = _find_pair(conn, save_id, pair)
        if existing is not None and existing["is_active"]:
            level = int(existing["level"])
            if level < MAX_LEVEL:
                level += 1
                conn.execute(
                    "UPDATE rivalries SET level=?, updated_at=? WHERE id=?;",
                    (level, now_iso(), existing["id"]),
                )
                action = ACTION_LEVELED_UP
            else:
                action = ACTION_MAX_LEVEL
            rivalry_id = int(existing["id"])
        else:
            level = MIN_LEVEL
            rivalry_id = _activate(conn, save_id, pair, existing, level, week)
            action = ACTION_STARTED

        out = _row_to_rivalry(conn, load_rivalry(conn, save_id, rivalry_id))

    emit("INFO", "rivalry.escalated", action, save_id=save_id, rivalry_id=rivalry_id, rivalry_level=level, week=week)
    return {"action": action, "new_level": level, "rivalry": out}


def end_rivalry(save_id: int, rivalry_id: int) -> Dict[str, Any]:
    # already ended: no-op
    with write_tx() as conn:
        save = load_save(conn, save_id)
        rivalry = load_rivalry(conn, save_id, rivalry_id)
        if rivalry["is_active"]:
            conn.execute(
                "UPDATE rivalries SET is_active=0, ended_week=?, updated_at=? WHERE id=?;",
                (int(save["current_week"]), now_iso(), rivalry_id),
            )
        out = _row_to_rivalry(conn, load_rivalry(conn, save_id, rivalry_id))

    if rivalry["is_active"]:
        emit("INFO", "rivalry.ended", "rivalry ended", save_id=save_id, rivalry_id=rivalry_id, week=out["ended_week"])
    return out


def delete_rivalry(save_id: int, rivalry_id: int) -> Dict[str, Any]:
    with write_tx() as conn:
        load_rivalry(conn, save_id, rivalry_id)
        conn.execute("DELETE FROM rivalries WHERE id=? AND save_id=?;", (rivalry_id, save_id))
    return {"id": rivalry_id, "deleted": True}
