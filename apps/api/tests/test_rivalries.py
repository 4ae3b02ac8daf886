from __future__ import annotations

import pytest

from mygm.core.errors import NotFound, ValidationError
from mygm.modules.finance.service import finalize_week_with_manual_finances
from mygm.modules.planner.service import add_planned_match
from mygm.modules.resolution.service import resolve_match
from mygm.modules.rivalries.service import (
    MAX_LEVEL,
    create_rivalry,
    delete_rivalry,
    end_rivalry,
    get_active_rivalries,
    get_inactive_rivalries,
    get_rivalry_matches,
    start_or_level_up_rivalry,
)
from mygm.modules.roster.service import delete_wrestler
from mygm.modules.saves.service import create_save, delete_save


def test_create_stores_the_pair_once_in_either_order(save, roster) -> None:
    a, b = roster[0], roster[1]

    r = create_rivalry(save["id"], b["id"], a["id"], level=2)

    assert (r["wrestler1_id"], r["wrestler2_id"]) == (a["id"], b["id"])
    assert (r["wrestler1_name"], r["wrestler2_name"]) == ("Ace", "Blaze")
    assert (r["level"], r["is_active"], r["started_week"]) == (2, True, 1)
    again = create_rivalry(save["id"], a["id"], b["id"])
    assert again["id"] == r["id"]
    assert again["level"] == 1
    assert [x["id"] for x in get_active_rivalries(save["id"])] == [r["id"]]


def test_escalation_starts_then_levels_up_to_the_cap(save, roster) -> None:
    a, b = roster[0], roster[1]

    actions = [start_or_level_up_rivalry(save["id"], a["id"], b["id"]) for _ in range(MAX_LEVEL + 1)]

    assert [(x["action"], x["new_level"]) for x in actions] == [
        ("started", 1),
        ("leveled_up", 2),
        ("leveled_up", 3),
        ("leveled_up", 4),
        ("max_level", 4),
    ]
    [r] = get_active_rivalries(save["id"])
    assert r["level"] == MAX_LEVEL


def test_ended_rivalry_moves_to_the_past_list_and_can_restart(save, roster) -> None:
    a, b = roster[0], roster[1]
    r = create_rivalry(save["id"], a["id"], b["id"], level=3)
    finalize_week_with_manual_finances(save["id"])

    ended = end_rivalry(save["id"], r["id"])

    assert (ended["is_active"], ended["ended_week"], ended["level"]) == (False, 2, 3)
    assert get_active_rivalries(save["id"]) == []
    assert [x["id"] for x in get_inactive_rivalries(save["id"])] == [r["id"]]
    assert end_rivalry(save["id"], r["id"])["ended_week"] == 2

    restarted = start_or_level_up_rivalry(save["id"], a["id"], b["id"])
    assert (restarted["action"], restarted["new_level"]) == ("started", 1)
    assert restarted["rivalry"]["id"] == r["id"]
    assert restarted["rivalry"]["ended_week"] is None
    assert get_inactive_rivalries(save["id"]) == []


@pytest.mark.parametrize("level", [0, 5])
def test_level_outside_range_is_rejected(save, roster, level) -> None:
    with pytest.raises(ValidationError) as e:
        create_rivalry(save["id"], roster[0]["id"], roster[1]["id"], level=level)
    assert e.value.code == "invalid_level"
    assert get_active_rivalries(save["id"]) == []


def test_rivalry_needs_two_wrestlers_of_this_save(save, roster) -> None:
    other = create_save(name="Elsewhere", brand="NXT")

    with pytest.raises(ValidationError):
        create_rivalry(save["id"], roster[0]["id"], roster[0]["id"])
    with pytest.raises(NotFound):
        create_rivalry(other["id"], roster[0]["id"], roster[1]["id"])


def test_head_to_head_counts_only_opposing_sides(save, roster) -> None:
    a, b, c, d = roster
    r = create_rivalry(save["id"], a["id"], b["id"])

    m1 = add_planned_match(save["id"], "1 vs 1", {0: [a["id"]], 1: [b["id"]]})
    resolve_match(save["id"], m1["id"], winner_id=a["id"], rating=4)
    m2 = add_planned_match(save["id"], "Triple Threat", {0: [a["id"]], 1: [b["id"]], 2: [c["id"]]})
    resolve_match(save["id"], m2["id"], winner_id=c["id"], rating=3)
    # same side: not head-to-head
    m3 = add_planned_match(save["id"], "Tag Team", {0: [a["id"], b["id"]], 1: [c["id"], d["id"]]})
    resolve_match(save["id"], m3["id"], winner_id=a["id"], rating=2)
    finalize_week_with_manual_finances(save["id"])
    m4 = add_planned_match(save["id"], "1 vs 1", {0: [b["id"]], 1: [a["id"]]})
    resolve_match(save["id"], m4["id"], winner_id=b["id"], rating=5)

    h2h = get_rivalry_matches(save["id"], r["id"])

    assert [(m["week"], m["rival_winner_id"]) for m in h2h["matches"]] == [
        (2, b["id"]),
        (1, None),
        (1, a["id"]),
    ]
    assert (h2h["wrestler1_wins"], h2h["wrestler2_wins"]) == (1, 1)


def test_delete_removes_the_row(save, roster) -> None:
    r = create_rivalry(save["id"], roster[0]["id"], roster[1]["id"])

    assert delete_rivalry(save["id"], r["id"]) == {"id": r["id"], "deleted": True}
    with pytest.raises(NotFound):
        get_rivalry_matches(save["id"], r["id"])


def test_rivalry_goes_with_its_wrestler_and_its_save(save, roster) -> None:
    a, b, c = roster[0], roster[1], roster[2]
    create_rivalry(save["id"], a["id"], b["id"])
    create_rivalry(save["id"], b["id"], c["id"])

    delete_wrestler(save["id"], a["id"])
    assert [(r["wrestler1_id"], r["wrestler2_id"]) for r in get_active_rivalries(save["id"])] == [(b["id"], c["id"])]

    delete_save(save["id"])
    with pytest.raises(NotFound):
        get_active_rivalries(save["id"])


def test_rivalry_routes(client) -> None:
    sid = client.post("/saves", json={"name": "Feud Night", "brand": "RAW"}).json()["id"]
    ids = [
        client.post(f"/saves/{sid}/wrestlers", json={"name": n, "gender": "Male", "alignment": "Face", "is_permanent": True}).json()["id"]
        for n in ("Ace", "Blaze")
    ]

    r = client.post(f"/saves/{sid}/rivalries", json={"wrestler1_id": ids[0], "wrestler2_id": ids[1]})
    assert r.status_code == 200
    rid = r.json()["id"]

    up = client.post(f"/saves/{sid}/rivalries/escalate", json={"wrestler1_id": ids[1], "wrestler2_id": ids[0]}).json()
    assert (up["action"], up["new_level"]) == ("leveled_up", 2)

    bad = client.post(f"/saves/{sid}/rivalries", json={"wrestler1_id": ids[0], "wrestler2_id": ids[1], "level": 9})
    assert bad.status_code == 422

    assert client.post(f"/saves/{sid}/rivalries/{rid}/end").json()["is_active"] is False
    assert client.get(f"/saves/{sid}/rivalries").json()["items"] == []
    assert [x["id"] for x in client.get(f"/saves/{sid}/rivalries", params={"active": False}).json()["items"]] == [rid]

    h2h = client.get(f"/saves/{sid}/rivalries/{rid}/matches").json()
    assert h2h["matches"] == [] and h2h["wrestler1_wins"] == 0

    assert client.delete(f"/saves/{sid}/rivalries/{rid}").json()["deleted"] is True
    missing = client.get(f"/saves/{sid}/rivalries/{rid}/matches")
    assert missing.status_code == 404
    assert missing.json()["error"] == "not_found"
