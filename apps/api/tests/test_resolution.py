from __future__ import annotations

import pytest

import mygm.modules.resolution.service as resolution_service
from mygm.core.errors import InvalidState, NotFound, ValidationError
from mygm.modules.finance.service import finalize_week_with_manual_finances, get_matches_by_week
from mygm.modules.planner.service import add_planned_match, get_current_show_cost, get_planned_match
from mygm.modules.resolution.service import resolve_match
from mygm.modules.roster.service import get_wrestler
from mygm.modules.saves.service import get_save
from mygm.modules.titles.service import (
    OUTCOME_CHANGE,
    OUTCOME_RETAIN,
    assign_title_with_history,
    get_title_history,
    list_titles,
    title_outcome,
)


def _title(save_id: int, category: str) -> dict:
    return next(t for t in list_titles(save_id) if t["category"] == category and t["gender"] == "Male")


def _record(save_id: int, w: dict) -> tuple:
    cur = get_wrestler(save_id, w["id"])
    return cur["wins"], cur["losses"]


def test_singles_match_updates_record_log_and_card(save, roster) -> None:
    x, y = roster[0], roster[1]
    assert save["current_cash"] == 2_750_000
    m = add_planned_match(save["id"], "1 vs 1", {0: [x["id"]], 1: [y["id"]]}, cost=0)

    r = resolve_match(save["id"], m["id"], winner_id=x["id"], rating=4)

    assert r["success"] is True
    assert r["is_title_change"] is False
    assert _record(save["id"], x) == (1, 0)
    assert _record(save["id"], y) == (0, 1)
    assert get_current_show_cost(save["id"]) == 0

    [log] = get_matches_by_week(save["id"], 1)
    assert (log["winner_id"], log["winner_name"], log["loser_name"], log["rating"]) == (x["id"], "Ace", "Blaze", 4)
    assert log["participants"] == {"winner": [x["id"]], "losers": [y["id"]]}

    card = get_planned_match(save["id"], m["id"])
    assert card["is_completed"] is True
    assert "Ace" in card["result_text"]


def test_second_resolution_is_refused_and_changes_nothing(save, roster) -> None:
    x, y = roster[0], roster[1]
    m = add_planned_match(save["id"], "1 vs 1", {0: [x["id"]], 1: [y["id"]]})
    resolve_match(save["id"], m["id"], winner_id=x["id"], rating=3)

    with pytest.raises(InvalidState) as e:
        resolve_match(save["id"], m["id"], winner_id=y["id"], rating=5)

    assert e.value.code == "already_resolved"
    assert _record(save["id"], x) == (1, 0)
    assert _record(save["id"], y) == (0, 1)
    assert len(get_matches_by_week(save["id"], 1)) == 1


def test_winner_must_be_a_participant(save, roster) -> None:
    x, y, outsider = roster[0], roster[1], roster[2]
    m = add_planned_match(save["id"], "1 vs 1", {0: [x["id"]], 1: [y["id"]]})

    with pytest.raises(ValidationError) as e:
        resolve_match(save["id"], m["id"], winner_id=outsider["id"], rating=3)

    assert e.value.code == "invalid_winner"
    assert get_planned_match(save["id"], m["id"])["is_completed"] is False
    assert _record(save["id"], x) == (0, 0)
    assert get_matches_by_week(save["id"], 1) == []


def test_unknown_match_is_not_found(save) -> None:
    with pytest.raises(NotFound):
        resolve_match(save["id"], 404, winner_id=1, rating=3)


def test_multi_team_match_gives_every_loser_one_loss(save, roster) -> None:
    a, b, c, d = roster
    m = add_planned_match(save["id"], "Fatal 4-Way", {0: [a["id"]], 1: [b["id"]], 2: [c["id"]], 3: [d["id"]]})

    resolve_match(save["id"], m["id"], winner_id=c["id"], rating=5)

    assert [_record(save["id"], w) for w in roster] == [(0, 1), (0, 1), (1, 0), (0, 1)]
    [log] = get_matches_by_week(save["id"], 1)
    assert sorted(log["participants"]["losers"]) == sorted([a["id"], b["id"], d["id"]])


def test_tag_match_credits_the_whole_winning_team(save, roster) -> None:
    a, b, c, d = roster
    m = add_planned_match(save["id"], "Tag Team", {0: [a["id"], b["id"]], 1: [c["id"], d["id"]]})

    resolve_match(save["id"], m["id"], winner_id=b["id"], rating=3)

    assert [_record(save["id"], w) for w in roster] == [(1, 0), (1, 0), (0, 1), (0, 1)]
    assert get_matches_by_week(save["id"], 1)[0]["winner_name"] == "Ace & Blaze"


def test_champion_retains_and_defense_is_counted(save, roster) -> None:
    champ, challenger = roster[0], roster[1]
    title = _title(save["id"], "World")
    assign_title_with_history(save["id"], title["id"], champ["id"])
    m = add_planned_match(save["id"], "1 vs 1", {0: [champ["id"]], 1: [challenger["id"]]}, is_title_match=True, title_id=title["id"])

    r = resolve_match(save["id"], m["id"], winner_id=champ["id"], rating=4)

    assert r["is_title_change"] is False
    hist = get_title_history(save["id"], title["id"])
    assert hist["reigns"] == []
    assert hist["title"]["holder1_id"] == champ["id"]
    assert hist["title"]["defenses"] == 1
    assert get_matches_by_week(save["id"], 1)[0]["title_name"] == title["name"]


def test_vacant_title_is_claimed_by_the_winner(save, roster) -> None:
    a, b, c, d = roster
    tag = _title(save["id"], "Tag")
    m = add_planned_match(save["id"], "Tag Team", {0: [a["id"], b["id"]], 1: [c["id"], d["id"]]}, is_title_match=True, title_id=tag["id"])

    r = resolve_match(save["id"], m["id"], winner_id=d["id"], rating=3)

    assert r["is_title_change"] is True
    hist = get_title_history(save["id"], tag["id"])
    assert (hist["title"]["holder1_id"], hist["title"]["holder2_id"]) == (c["id"], d["id"])
    assert hist["reigns"] == []
    assert get_matches_by_week(save["id"], 1)[0]["is_title_change"] is True


def test_split_tag_holders_are_refused_before_any_change(save, roster) -> None:
    a, b, c, d = roster
    tag = _title(save["id"], "Tag")
    m = add_planned_match(save["id"], "Tag Team", {0: [a["id"], c["id"]], 1: [b["id"], d["id"]]}, is_title_match=True, title_id=tag["id"])
    # belts change hands after the card was booked
    assign_title_with_history(save["id"], tag["id"], a["id"], b["id"])

    with pytest.raises(InvalidState) as e:
        resolve_match(save["id"], m["id"], winner_id=a["id"], rating=3)

    assert e.value.code == "ambiguous_title_holders"
    assert [_record(save["id"], w) for w in roster] == [(0, 0)] * 4
    assert get_planned_match(save["id"], m["id"])["is_completed"] is False
    assert get_save(save["id"])["current_week"] == 1


def test_failure_after_partial_writes_rolls_back_everything(save, roster, monkeypatch) -> None:
    champ, challenger = roster[0], roster[1]
    title = _title(save["id"], "World")
    assign_title_with_history(save["id"], title["id"], champ["id"])
    finalize_week_with_manual_finances(save["id"])
    m = add_planned_match(save["id"], "1 vs 1", {0: [champ["id"]], 1: [challenger["id"]]}, is_title_match=True, title_id=title["id"])

    real_insert = resolution_service.insert

    def failing_insert(conn, table, row):
        if table == "match_log":
            raise RuntimeError("disk full")
        return real_insert(conn, table, row)

    # records and the reign are already written when the log insert fails
    with monkeypatch.context() as mp:
        mp.setattr(resolution_service, "insert", failing_insert)
        with pytest.raises(RuntimeError):
            resolve_match(save["id"], m["id"], winner_id=challenger["id"], rating=5)

    assert _record(save["id"], champ) == (0, 0)
    assert _record(save["id"], challenger) == (0, 0)
    assert get_planned_match(save["id"], m["id"])["is_completed"] is False
    hist = get_title_history(save["id"], title["id"])
    assert (hist["title"]["holder1_id"], hist["title"]["week_won"]) == (champ["id"], 1)
    assert hist["reigns"] == []
    assert get_matches_by_week(save["id"], 2) == []

    r = resolve_match(save["id"], m["id"], winner_id=challenger["id"], rating=5)
    assert r["is_title_change"] is True
    assert len(get_title_history(save["id"], title["id"])["reigns"]) == 1


def test_title_outcome_rules() -> None:
    assert title_outcome([], [1]) == OUTCOME_CHANGE
    assert title_outcome([1], [1]) == OUTCOME_RETAIN
    assert title_outcome([1, 2], [2, 1]) == OUTCOME_RETAIN
    assert title_outcome([1], [2]) == OUTCOME_CHANGE
    assert title_outcome([1, 2], [3, 4]) == OUTCOME_CHANGE
    assert title_outcome([1, 2], [1, 3]) is None


def test_single_slot_promo_resolves_without_losers(save, roster) -> None:
    a = roster[0]
    m = add_planned_match(save["id"], "Promo: Self Promo", {0: [a["id"]]}, cost=2500)

    resolve_match(save["id"], m["id"], winner_id=a["id"], rating=2)

    [log] = get_matches_by_week(save["id"], 1)
    assert log["participants"] == {"winner": [a["id"]], "losers": []}
    assert log["loser_name"] == ""
