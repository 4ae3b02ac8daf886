from __future__ import annotations

import os
import sqlite3
from typing import Any, Dict, List, Optional

from mygm.core.audit import emit, now_iso
from mygm.core.db import insert, read_conn, write_tx
from mygm.core.errors import NotFound, ValidationError
from mygm.modules.catalog.service import brand_color, brand_titles

DEFAULT_STARTING_CASH = 2_750_000.0


def starting_cash() -> float:
    raw = os.getenv("MYGM_STARTING_CASH")
    if not raw:
        return DEFAULT_STARTING_CASH
    return float(raw)


def load_save(conn: sqlite3.Connection, save_id: int) -> sqlite3.Row:
    """Every save-scoped operation starts here."""
    row = conn.execute("SELECT * FROM saves WHERE id=?;", (save_id,)).fetchone()
    if not row:
        raise NotFound("save not found", details={"save_id": save_id})
    return row


def _row_to_save(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


def list_saves() -> List[Dict[str, Any]]:
    with read_conn() as conn:
        rows = conn.execute("SELECT * FROM saves ORDER BY id DESC;").fetchall()
        return [_row_to_save(r) for r in rows]


def get_save(save_id: int) -> Dict[str, Any]:
    with read_conn() as conn:
        return _row_to_save(load_save(conn, save_id))


def create_save(
    name: str,
    brand: str,
    theme_color: Optional[str] = None,
    cash: Optional[float] = None,
) -> Dict[str, Any]:
    name = (name or "").strip()
    brand = (brand or "").strip()
    if not name or not brand:
        raise ValidationError("name and brand are required")
    opening = starting_cash() if cash is None else float(cash)
    if opening < 0:
        raise ValidationError("starting cash cannot be negative", code="invalid_amount")

    with write_tx() as conn:
        save_id = insert(
            conn,
            "saves",
            {
                "name": name,
                "brand": brand,
                "theme_color": theme_color or brand_color(brand),
                "current_week": 1,
                "current_cash": opening,
                "created_at": now_iso(),
            },
        )
        # championships start vacant
        for t in brand_titles(brand):
            insert(
                conn,
                "titles",
                {
                    "save_id": save_id,
                    "name": t["name"],
                    "category": t["category"],
                    "gender": t["gender"],
                    "holder1_id": None,
                    "holder2_id": None,
                    "week_won": 1,
                    "image_ref": t.get("image_ref"),
                },
            )
        row = load_save(conn, save_id)

    emit("INFO", "save.created", "save created", save_id=save_id, brand=brand)
    return _row_to_save(row)


def delete_save(save_id: int) -> Dict[str, Any]:
    with write_tx() as conn:
        load_save(conn, save_id)
        # every owned row goes with it (ON DELETE CASCADE)
        conn.execute("DELETE FROM saves WHERE id=?;", (save_id,))

    emit("INFO", "save.deleted", "save deleted", save_id=save_id)
    return {"id": save_id, "deleted": True}
