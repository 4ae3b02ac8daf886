from __future__ import annotations

import pytest

from mygm.core.db import read_conn
from mygm.core.errors import NotFound, ValidationError
from mygm.modules.catalog.service import brand_color
from mygm.modules.roster.service import add_wrestler
from mygm.modules.saves.service import create_save, delete_save, get_save, list_saves
from mygm.modules.titles.service import list_titles


def test_create_save_opens_at_week_one_with_starting_cash(db) -> None:
    s = create_save(name="Career", brand="RAW")

    assert s["current_week"] == 1
    assert s["current_cash"] == 2_750_000
    assert s["theme_color"] == brand_color("RAW")


def test_starting_cash_can_come_from_env(db, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MYGM_STARTING_CASH", "1000000")

    assert create_save(name="Budget", brand="NXT")["current_cash"] == 1_000_000


def test_create_save_seeds_vacant_brand_titles(db) -> None:
    s = create_save(name="Career", brand="SmackDown")

    titles = list_titles(s["id"])
    assert len(titles) == 8
    assert all(t["is_vacant"] and t["week_won"] == 1 for t in titles)
    assert {t["category"] for t in titles} == {"World", "Midcard", "Tag", "MITB"}


def test_custom_brand_gets_generic_title_set(db) -> None:
    s = create_save(name="Indie", brand="AAA")

    names = sorted(t["name"] for t in list_titles(s["id"]))
    assert names == ["AAA Midcard Champ", "AAA Tag Team Champs", "AAA Womens Champ", "AAA World Champ"]


def test_create_save_requires_name_and_brand(db) -> None:
    with pytest.raises(ValidationError):
        create_save(name=" ", brand="RAW")


def test_list_saves_newest_first(db) -> None:
    a = create_save(name="A", brand="RAW")
    b = create_save(name="B", brand="NXT")

    assert [s["id"] for s in list_saves()] == [b["id"], a["id"]]


def test_delete_save_cascades_to_owned_rows(db) -> None:
    s = create_save(name="Doomed", brand="RAW")
    keep = create_save(name="Keep", brand="RAW")
    add_wrestler(s["id"], name="Ace", gender="Male", alignment="Face", salary=5000)

    delete_save(s["id"])

    with pytest.raises(NotFound):
        get_save(s["id"])
    with read_conn() as conn:
        for table in ("wrestlers", "titles", "finances"):
            n = conn.execute(f"SELECT COUNT(1) AS n FROM {table} WHERE save_id=?;", (s["id"],)).fetchone()["n"]
            assert n == 0, table
        kept = conn.execute("SELECT COUNT(1) AS n FROM titles WHERE save_id=?;", (keep["id"],)).fetchone()["n"]
    assert kept == 8


def test_delete_missing_save_is_not_found(db) -> None:
    with pytest.raises(NotFound):
        delete_save(999)
