from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from mygm.core.audit import emit, now_iso
from mygm.core.db import insert, read_conn, write_tx
from mygm.core.errors import InvalidState, NotFound, ValidationError
from mygm.modules.finance.service import KIND_OUT, adjust_cash, record_entry
from mygm.modules.saves.service import load_save
from mygm.modules.titles.service import close_reign, set_holders

GENDERS = ("Male", "Female")
ALIGNMENTS = ("Face", "Heel")

DEFAULT_CONTRACT_WEEKS = 25
EXPIRING_WEEKS = 5

EDITABLE_FIELDS = (
    "name",
    "gender",
    "alignment",
    "ring_level",
    "mic",
    "main_class",
    "alt_class",
    "is_permanent",
    "weeks_remaining",
    "salary",
    "image_ref",
)


def load_wrestler(conn: sqlite3.Connection, save_id: int, wrestler_id: int) -> sqlite3.Row:
    row = conn.execute("SELECT * FROM wrestlers WHERE id=? AND save_id=?;", (wrestler_id, save_id)).fetchone()
    if not row:
        raise NotFound("wrestler not found", details={"save_id": save_id, "wrestler_id": wrestler_id})
    return row


def is_expired(row: Any) -> bool:
    return not row["is_permanent"] and int(row["weeks_remaining"]) <= 0


def _row_to_wrestler(row: sqlite3.Row) -> Dict[str, Any]:
    d = dict(row)
    d["is_permanent"] = bool(d["is_permanent"])
    weeks = int(d["weeks_remaining"])
    d["is_expired"] = is_expired(row)
    d["is_expiring"] = (not d["is_permanent"]) and 0 < weeks <= EXPIRING_WEEKS
    return d


def _check_fields(fields: Dict[str, Any]) -> None:
    if "name" in fields and not (fields["name"] or "").strip():
        raise ValidationError("name is required")
    if "gender" in fields and fields["gender"] not in GENDERS:
        raise ValidationError("gender must be Male or Female", details={"gender": fields["gender"]})
    if "alignment" in fields and fields["alignment"] not in ALIGNMENTS:
        raise ValidationError("alignment must be Face or Heel", details={"alignment": fields["alignment"]})
    if "salary" in fields and float(fields["salary"] or 0) < 0:
        raise ValidationError("salary cannot be negative", code="invalid_amount")


# -------------------------
# reads
# -------------------------
def list_wrestlers(save_id: int, bookable_only: bool = False) -> List[Dict[str, Any]]:
    with read_conn() as conn:
        load_save(conn, save_id)
        where = "WHERE save_id=?"
        if bookable_only:
            where += " AND (is_permanent=1 OR weeks_remaining > 0)"
        rows = conn.execute(
            f"SELECT * FROM wrestlers {where} ORDER BY name COLLATE NOCASE ASC, id ASC;",
            (save_id,),
        ).fetchall()
        return [_row_to_wrestler(r) for r in rows]


def get_wrestler(save_id: int, wrestler_id: int) -> Dict[str, Any]:
    with read_conn() as conn:
        return _row_to_wrestler(load_wrestler(conn, save_id, wrestler_id))


# -------------------------
# writes
# -------------------------
def add_wrestler(
    save_id: int,
    name: str,
    gender: str,
    alignment: str,
    ring_level: int = 50,
    mic: int = 50,
    main_class: str = "Fighter",
    alt_class: str = "None",
    is_permanent: bool = False,
    weeks_remaining: int = DEFAULT_CONTRACT_WEEKS,
    salary: float = 0.0,
    image_ref: Optional[str] = None,
) -> Dict[str, Any]:
    _check_fields({"name": name, "gender": gender, "alignment": alignment, "salary": salary})

    with write_tx() as conn:
        save = load_save(conn, save_id)
        now = now_iso()
        wid = insert(
            conn,
            "wrestlers",
            {
                "save_id": save_id,
                "name": name.strip(),
                "gender": gender,
                "alignment": alignment,
                "ring_level": int(ring_level),
                "mic": int(mic),
                "main_class": main_class,
                "alt_class": alt_class or "None",
                "is_permanent": 1 if is_permanent else 0,
                "weeks_remaining": int(weeks_remaining),
                "salary": float(salary or 0),
                "wins": 0,
                "losses": 0,
                "image_ref": image_ref,
                "created_at": now,
                "updated_at": now,
            },
        )
        # signing fee
        if not is_permanent and float(salary or 0) > 0:
            record_entry(
                conn,
                save_id=save_id,
                week=int(save["current_week"]),
                category="Signing",
                description=f"Signing: {name.strip()}",
                amount=float(salary),
                kind=KIND_OUT,
            )
            adjust_cash(conn, save_id, -float(salary))
        row = load_wrestler(conn, save_id, wid)

    return _row_to_wrestler(row)


def update_wrestler(save_id: int, wrestler_id: int, patch: Dict[str, Any]) -> Dict[str, Any]:
    fields = {k: v for k, v in patch.items() if k in EDITABLE_FIELDS and v is not None}
    _check_fields(fields)
    if "is_permanent" in fields:
        fields["is_permanent"] = 1 if fields["is_permanent"] else 0
    if "name" in fields:
        fields["name"] = fields["name"].strip()

    with write_tx() as conn:
        load_wrestler(conn, save_id, wrestler_id)
        if fields:
            fields["updated_at"] = now_iso()
            keys = sorted(fields.keys())
            conn.execute(
                f"UPDATE wrestlers SET {', '.join(f'{k}=?' for k in keys)} WHERE id=? AND save_id=?;",
                [fields[k] for k in keys] + [wrestler_id, save_id],
            )
        row = load_wrestler(conn, save_id, wrestler_id)

    return _row_to_wrestler(row)


def delete_wrestler(save_id: int, wrestler_id: int) -> Dict[str, Any]:
    with write_tx() as conn:
        save = load_save(conn, save_id)
        load_wrestler(conn, save_id, wrestler_id)

        booked = conn.execute(
            "SELECT pm.id FROM planned_match_participants p "
            "JOIN planned_matches pm ON pm.id = p.match_id "
            "WHERE pm.save_id=? AND pm.is_completed=0 AND p.wrestler_id=? ORDER BY pm.id ASC;",
            (save_id, wrestler_id),
        ).fetchall()
        if booked:
            raise InvalidState(
                "wrestler is booked on the current card",
                code="wrestler_booked",
                details={"match_ids": [int(r["id"]) for r in booked]},
            )

        week = int(save["current_week"])
        held = conn.execute(
            "SELECT * FROM titles WHERE save_id=? AND (holder1_id=? OR holder2_id=?) ORDER BY id ASC;",
            (save_id, wrestler_id, wrestler_id),
        ).fetchall()
        for t in held:
            close_reign(conn, t, week_lost=week)
            set_holders(conn, int(t["id"]), None, None, int(t["week_won"]))

        conn.execute("DELETE FROM wrestlers WHERE id=? AND save_id=?;", (wrestler_id, save_id))

    return {"id": wrestler_id, "deleted": True, "vacated_title_ids": [int(t["id"]) for t in held]}


def renew_contract(save_id: int, wrestler_id: int, cost: float, weeks: int) -> Dict[str, Any]:
    if weeks is None or int(weeks) <= 0:
        raise InvalidState("renewal needs a positive number of weeks", code="invalid_contract", details={"weeks": weeks})
    if cost is None or float(cost) < 0:
        raise ValidationError("renewal cost cannot be negative", code="invalid_amount", details={"cost": cost})

    with write_tx() as conn:
        save = load_save(conn, save_id)
        w = load_wrestler(conn, save_id, wrestler_id)
        if w["is_permanent"]:
            raise InvalidState("permanent contracts do not renew", code="invalid_contract")

        new_weeks = max(int(w["weeks_remaining"]), 0) + int(weeks)
        conn.execute(
            "UPDATE wrestlers SET weeks_remaining=?, updated_at=? WHERE id=?;",
            (new_weeks, now_iso(), wrestler_id),
        )
        if float(cost) > 0:
            record_entry(
                conn,
                save_id=save_id,
                week=int(save["current_week"]),
                category="Contract",
                description=f"Renewal: {w['name']} ({int(weeks)} weeks)",
                amount=float(cost),
                kind=KIND_OUT,
            )
            adjust_cash(conn, save_id, -float(cost))
        row = load_wrestler(conn, save_id, wrestler_id)

    emit("INFO", "contract.renewed", "contract renewed", save_id=save_id, wrestler_id=wrestler_id, weeks=int(weeks), cost=float(cost))
    return _row_to_wrestler(row)
