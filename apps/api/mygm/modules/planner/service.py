from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Mapping, Optional, Sequence

from mygm.core.audit import now_iso
from mygm.core.db import insert, read_conn, write_tx
from mygm.core.errors import InvalidState, NotFound, ValidationError
from mygm.modules.catalog.service import STIPULATIONS, find_format, find_promo, is_promo
from mygm.modules.roster.service import is_expired
from mygm.modules.saves.service import load_save
from mygm.modules.titles.service import CATEGORY_MITB, CATEGORY_TAG, holders_of, load_title, title_outcome

TAG_TEAM_FORMAT = "2v2"

Teams = Dict[int, List[int]]


def load_match(conn: sqlite3.Connection, save_id: int, match_id: int) -> sqlite3.Row:
    row = conn.execute("SELECT * FROM planned_matches WHERE id=? AND save_id=?;", (match_id, save_id)).fetchone()
    if not row:
        raise NotFound("match not found", details={"save_id": save_id, "match_id": match_id})
    return row


def match_teams(conn: sqlite3.Connection, match_id: int) -> Teams:
    rows = conn.execute(
        "SELECT team_index, wrestler_id FROM planned_match_participants WHERE match_id=? ORDER BY team_index ASC, slot ASC;",
        (match_id,),
    ).fetchall()
    teams: Teams = {}
    for r in rows:
        teams.setdefault(int(r["team_index"]), []).append(int(r["wrestler_id"]))
    return teams


def _normalize_teams(participants_by_team: Mapping[Any, Sequence[int]]) -> Teams:
    # team keys may arrive as strings from JSON; re-index 0..n-1 in key order
    keyed = sorted(((int(k), list(v or [])) for k, v in (participants_by_team or {}).items()), key=lambda kv: kv[0])
    return {i: [int(w) for w in members] for i, (_k, members) in enumerate(keyed)}


def _validate_booking(
    conn: sqlite3.Connection,
    save_id: int,
    match_type: str,
    teams: Teams,
    stipulation: str,
    cost: float,
    is_title_match: bool,
    title_id: Optional[int],
) -> None:
    if cost is None or float(cost) < 0:
        raise ValidationError("cost cannot be negative", code="invalid_amount", details={"cost": cost})

    if is_promo(match_type):
        promo = find_promo(match_type)
        if promo is None:
            raise ValidationError("unknown promo type", details={"match_type": match_type})
        needed_teams, per_team = (2 if promo["is_vs"] else 1), 1
        if is_title_match:
            raise ValidationError("promos cannot be title matches", code="invalid_title")
    else:
        fmt = find_format(match_type)
        if fmt is None:
            raise ValidationError("unknown match type", details={"match_type": match_type})
        needed_teams, per_team = int(fmt["teams"]), int(fmt["members_per_team"])
        if stipulation not in {s["name"] for s in STIPULATIONS}:
            raise ValidationError("unknown stipulation", details={"stipulation": stipulation})

    if len(teams) != needed_teams or any(len(m) != per_team for m in teams.values()):
        raise ValidationError(
            f"{match_type} needs {needed_teams} team(s) of {per_team}",
            code="incomplete_participants",
            details={"teams": needed_teams, "members_per_team": per_team},
        )

    everyone = [w for members in teams.values() for w in members]
    if len(set(everyone)) != len(everyone):
        raise ValidationError("a wrestler can only appear once per match", code="incomplete_participants")

    for wid in everyone:
        w = conn.execute("SELECT * FROM wrestlers WHERE id=? AND save_id=?;", (wid, save_id)).fetchone()
        if not w:
            raise NotFound("wrestler not found", details={"wrestler_id": wid})
        if is_expired(w):
            raise ValidationError(f"{w['name']}'s contract has expired", code="contract_expired", details={"wrestler_id": wid})

    if is_title_match:
        if title_id is None:
            raise ValidationError("title match needs a title", code="invalid_title")
        title = load_title(conn, save_id, title_id)
        if title["category"] == CATEGORY_MITB:
            raise ValidationError("briefcases are not defended in matches", code="invalid_title")
        tag_match = find_format(match_type)["id"] == TAG_TEAM_FORMAT
        if (title["category"] == CATEGORY_TAG) != tag_match:
            raise ValidationError(
                "tag titles go with Tag Team matches only",
                code="invalid_title",
                details={"category": title["category"], "match_type": match_type},
            )
        # every possible winner must lead to a change or a defense
        holders = holders_of(title)
        if any(title_outcome(holders, members) is None for members in teams.values()):
            raise ValidationError(
                "current holders are split across teams",
                code="invalid_title",
                details={"holders": holders, "participants_by_team": teams},
            )


def _write_participants(conn: sqlite3.Connection, match_id: int, teams: Teams) -> None:
    conn.execute("DELETE FROM planned_match_participants WHERE match_id=?;", (match_id,))
    for team_index, members in teams.items():
        for slot, wid in enumerate(members):
            insert(
                conn,
                "planned_match_participants",
                {"match_id": match_id, "team_index": team_index, "slot": slot, "wrestler_id": wid},
            )


def _row_to_match(conn: sqlite3.Connection, row: sqlite3.Row) -> Dict[str, Any]:
    d = dict(row)
    d["is_title_match"] = bool(d["is_title_match"])
    d["is_completed"] = bool(d["is_completed"])
    d["is_promo"] = is_promo(d["match_type"])
    parts = conn.execute(
        "SELECT p.team_index, p.slot, p.wrestler_id, w.name FROM planned_match_participants p "
        "LEFT JOIN wrestlers w ON w.id = p.wrestler_id "
        "WHERE p.match_id=? ORDER BY p.team_index ASC, p.slot ASC;",
        (d["id"],),
    ).fetchall()
    teams: Teams = {}
    for p in parts:
        teams.setdefault(int(p["team_index"]), []).append(int(p["wrestler_id"]))
    d["participants_by_team"] = teams
    d["participants"] = [
        {"team_index": int(p["team_index"]), "slot": int(p["slot"]), "wrestler_id": int(p["wrestler_id"]), "name": p["name"]}
        for p in parts
    ]
    d["title_name"] = None
    if d["title_id"] is not None:
        t = conn.execute("SELECT name FROM titles WHERE id=?;", (d["title_id"],)).fetchone()
        d["title_name"] = t["name"] if t else None
    return d


# -------------------------
# reads
# -------------------------
def list_planned_matches(save_id: int, week: Optional[int] = None) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        save = load_save(conn, save_id)
        wk = int(save["current_week"]) if week is None else int(week)
        rows = conn.execute(
            "SELECT * FROM planned_matches WHERE save_id=? AND week=? ORDER BY sort_order ASC, id ASC;",
            (save_id, wk),
        ).fetchall()
        return [_row_to_match(conn, r) for r in rows]


def get_planned_match(save_id: int, match_id: int) -> Dict[str, Any]:
    with read_conn() as conn:
        return _row_to_match(conn, load_match(conn, save_id, match_id))


def get_current_show_cost(save_id: int) -> float:
    """Booked cost of the whole card, resolved or not."""
    with read_conn() as conn:
        save = load_save(conn, save_id)
        row = conn.execute(
            "SELECT COALESCE(SUM(cost), 0) AS c FROM planned_matches WHERE save_id=? AND week=?;",
            (save_id, int(save["current_week"])),
        ).fetchone()
        return float(row["c"])


# -------------------------
# writes
# -------------------------
def add_planned_match(
    save_id: int,
    match_type: str,
    participants_by_team: Mapping[Any, Sequence[int]],
    stipulation: str = "Normal",
    cost: float = 0.0,
    is_title_match: bool = False,
    title_id: Optional[int] = None,
) -> Dict[str, Any]:
    teams = _normalize_teams(participants_by_team)
    stipulation = "Normal" if is_promo(match_type) else (stipulation or "Normal")

    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        _validate_booking(conn, save_id, match_type, teams, stipulation, cost, is_title_match, title_id)

        row = conn.execute(
            "SELECT COALESCE(MAX(sort_order), 0) AS m FROM planned_matches WHERE save_id=? AND week=?;",
            (save_id, week),
        ).fetchone()
        now = now_iso()
        match_id = insert(
            conn,
            "planned_matches",
            {
                "save_id": save_id,
                "week": week,
                "match_type": match_type,
                "stipulation": stipulation,
                "cost": float(cost),
                "is_title_match": 1 if is_title_match else 0,
                "title_id": title_id if is_title_match else None,
                "is_completed": 0,
                "result_text": None,
                "sort_order": int(row["m"]) + 1,
                "created_at": now,
                "updated_at": now,
            },
        )
        _write_participants(conn, match_id, teams)
        return _row_to_match(conn, load_match(conn, save_id, match_id))


def update_planned_match(save_id: int, match_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    with write_tx() as conn:
        current = load_match(conn, save_id, match_id)
        if current["is_completed"]:
            raise InvalidState("a resolved match can no longer be edited", code="not_editable", details={"match_id": match_id})

        match_type = patch.get("match_type") or current["match_type"]
        stipulation = patch.get("stipulation") or current["stipulation"]
        if is_promo(match_type):
            stipulation = "Normal"
        cost = patch["cost"] if patch.get("cost") is not None else float(current["cost"])
        is_title_match = bool(patch["is_title_match"]) if patch.get("is_title_match") is not None else bool(current["is_title_match"])
        title_id = patch["title_id"] if "title_id" in patch else current["title_id"]
        if patch.get("participants_by_team") is not None:
            teams = _normalize_teams(patch["participants_by_team"])
        else:
            teams = match_teams(conn, match_id)

        _validate_booking(conn, save_id, match_type, teams, stipulation, cost, is_title_match, title_id)

        conn.execute(
            "UPDATE planned_matches SET match_type=?, stipulation=?, cost=?, is_title_match=?, title_id=?, updated_at=? "
            "WHERE id=? AND save_id=?;",
            (
                match_type,
                stipulation,
                float(cost),
                1 if is_title_match else 0,
                title_id if is_title_match else None,
                now_iso(),
                match_id,
                save_id,
            ),
        )
        _write_participants(conn, match_id, teams)
        return _row_to_match(conn, load_match(conn, save_id, match_id))


def delete_planned_match(save_id: int, match_id: int) -> Dict[str, Any]:
    # allowed for resolved matches too; the match log keeps its rows
    with write_tx() as conn:
        load_match(conn, save_id, match_id)
        conn.execute("DELETE FROM planned_matches WHERE id=? AND save_id=?;", (match_id, save_id))
    return {"id": match_id, "deleted": True}


def reorder_matches(save_id: int, ordered_ids: Sequence[int]) -> List[Dict[str, Any]]:
    """Rewrite sort_order of the current card to follow ordered_ids (1-based)."""
    ordered = [int(i) for i in ordered_ids]
    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        rows = conn.execute(
            "SELECT id FROM planned_matches WHERE save_id=? AND week=?;",
            (save_id, week),
        ).fetchall()
        existing = {int(r["id"]) for r in rows}
        if len(set(ordered)) != len(ordered) or set(ordered) != existing:
            raise ValidationError(
                "order must list every match of the current card exactly once",
                code="invalid_order",
                details={"expected": sorted(existing), "got": ordered},
            )
        now = now_iso()
        for pos, match_id in enumerate(ordered, start=1):
            conn.execute(
                "UPDATE planned_matches SET sort_order=?, updated_at=? WHERE id=?;",
                (pos, now, match_id),
            )
        rows = conn.execute(
            "SELECT * FROM planned_matches WHERE save_id=? AND week=? ORDER BY sort_order ASC, id ASC;",
            (save_id, week),
        ).fetchall()
        return [_row_to_match(conn, r) for r in rows]
