from __future__ import annotations

import pytest

from mygm.core.errors import NotFound, ValidationError
from mygm.modules.finance.service import finalize_week_with_manual_finances
from mygm.modules.planner.service import add_planned_match
from mygm.modules.resolution.service import resolve_match
from mygm.modules.saves.service import get_save
from mygm.modules.titles.service import assign_title_with_history, get_title_history, list_titles


def _title(save_id: int, category: str, gender: str = "Male") -> dict:
    return next(t for t in list_titles(save_id) if t["category"] == category and t["gender"] == gender)


def _advance_to(save_id: int, week: int) -> None:
    while get_save(save_id)["current_week"] < week:
        finalize_week_with_manual_finances(save_id, {})


def test_coronation_of_a_vacant_title_creates_no_history(save, roster) -> None:
    x = roster[0]
    title = _title(save["id"], "World")
    _advance_to(save["id"], 5)

    t = assign_title_with_history(save["id"], title["id"], x["id"])

    assert t["holder1_id"] == x["id"]
    assert t["week_won"] == 5
    assert get_title_history(save["id"], title["id"])["reigns"] == []


def test_title_change_in_a_match_closes_the_reign(save, roster) -> None:
    x, y = roster[0], roster[1]
    title = _title(save["id"], "World")
    _advance_to(save["id"], 5)
    assign_title_with_history(save["id"], title["id"], x["id"])
    _advance_to(save["id"], 9)

    m = add_planned_match(save["id"], "1 vs 1", {0: [x["id"]], 1: [y["id"]]}, is_title_match=True, title_id=title["id"])
    r = resolve_match(save["id"], m["id"], winner_id=y["id"], rating=4)

    assert r["is_title_change"] is True
    hist = get_title_history(save["id"], title["id"])
    assert hist["title"]["holder1_id"] == y["id"]
    assert hist["title"]["week_won"] == 9
    [reign] = hist["reigns"]
    assert (reign["holder1_id"], reign["week_won"], reign["week_lost"], reign["defeated_by1_id"]) == (x["id"], 5, 9, y["id"])
    assert reign["weeks_held"] == 4


def test_manual_reassignment_records_unknown_defeater(save, roster) -> None:
    x, y = roster[0], roster[1]
    title = _title(save["id"], "Midcard")
    assign_title_with_history(save["id"], title["id"], x["id"])
    _advance_to(save["id"], 3)

    assign_title_with_history(save["id"], title["id"], y["id"])

    [reign] = get_title_history(save["id"], title["id"])["reigns"]
    assert reign["holder1_id"] == x["id"]
    assert (reign["week_won"], reign["week_lost"]) == (1, 3)
    assert reign["defeated_by1_id"] is None and reign["defeated_by2_id"] is None


def test_reassigning_the_same_holder_is_a_no_op(save, roster) -> None:
    x = roster[0]
    title = _title(save["id"], "World")
    assign_title_with_history(save["id"], title["id"], x["id"])
    _advance_to(save["id"], 2)

    t = assign_title_with_history(save["id"], title["id"], x["id"])

    assert t["week_won"] == 1
    assert get_title_history(save["id"], title["id"])["reigns"] == []


def test_vacating_a_title_closes_the_reign(save, roster) -> None:
    title = _title(save["id"], "World")
    assign_title_with_history(save["id"], title["id"], roster[0]["id"])
    _advance_to(save["id"], 2)

    t = assign_title_with_history(save["id"], title["id"], None)

    assert t["is_vacant"]
    [reign] = get_title_history(save["id"], title["id"])["reigns"]
    assert (reign["week_won"], reign["week_lost"]) == (1, 2)


def test_title_lost_in_the_week_it_was_won_leaves_no_reign(save, roster) -> None:
    x, y = roster[0], roster[1]
    title = _title(save["id"], "World")
    assign_title_with_history(save["id"], title["id"], x["id"])

    m = add_planned_match(save["id"], "1 vs 1", {0: [x["id"]], 1: [y["id"]]}, is_title_match=True, title_id=title["id"])
    r = resolve_match(save["id"], m["id"], winner_id=y["id"], rating=3)

    assert r["is_title_change"] is True
    hist = get_title_history(save["id"], title["id"])
    assert (hist["title"]["holder1_id"], hist["title"]["week_won"]) == (y["id"], 1)
    assert hist["reigns"] == []


def test_same_week_vacate_leaves_no_reign(save, roster) -> None:
    title = _title(save["id"], "Midcard")
    assign_title_with_history(save["id"], title["id"], roster[0]["id"])
    assign_title_with_history(save["id"], title["id"], roster[1]["id"])

    t = assign_title_with_history(save["id"], title["id"], None)

    assert t["is_vacant"]
    assert get_title_history(save["id"], title["id"])["reigns"] == []


def test_tag_titles_take_two_holders(save, roster) -> None:
    a, b = roster[0], roster[1]
    tag = _title(save["id"], "Tag")

    t = assign_title_with_history(save["id"], tag["id"], a["id"], b["id"])

    assert (t["holder1_name"], t["holder2_name"]) == (a["name"], b["name"])


def test_singles_title_refuses_second_holder(save, roster) -> None:
    world = _title(save["id"], "World")

    with pytest.raises(ValidationError) as e:
        assign_title_with_history(save["id"], world["id"], roster[0]["id"], roster[1]["id"])
    assert e.value.code == "invalid_title"


def test_same_wrestler_twice_is_rejected(save, roster) -> None:
    tag = _title(save["id"], "Tag")

    with pytest.raises(ValidationError):
        assign_title_with_history(save["id"], tag["id"], roster[0]["id"], roster[0]["id"])


def test_assigning_unknown_wrestler_is_not_found(save) -> None:
    world = _title(save["id"], "World")

    with pytest.raises(NotFound):
        assign_title_with_history(save["id"], world["id"], 12345)


def test_reigns_never_overlap(save, roster) -> None:
    title = _title(save["id"], "World")
    for week, holder in ((1, roster[0]), (3, roster[1]), (6, roster[2]), (8, roster[3])):
        _advance_to(save["id"], week)
        assign_title_with_history(save["id"], title["id"], holder["id"])

    reigns = sorted(get_title_history(save["id"], title["id"])["reigns"], key=lambda r: r["week_won"])
    assert [(r["week_won"], r["week_lost"]) for r in reigns] == [(1, 3), (3, 6), (6, 8)]
    for prev, nxt in zip(reigns, reigns[1:]):
        assert prev["week_lost"] <= nxt["week_won"]
    assert all(r["week_lost"] > r["week_won"] for r in reigns)
