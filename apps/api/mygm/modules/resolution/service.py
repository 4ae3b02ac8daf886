"""
Match resolution: one transaction that applies a result to the roster, the
title registry, the permanent match log and the card.

Title outcome (title matches only):
- vacant title, or holders not in the winning team -> title change
- every holder inside the winning team             -> retain (defense row)
- holders split between winners and losers          -> ambiguous, refused
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, List

from mygm.core.audit import emit, now_iso
from mygm.core.db import insert, write_tx
from mygm.core.errors import InvalidState, ValidationError
from mygm.modules.planner.service import load_match, match_teams
from mygm.modules.saves.service import load_save
from mygm.modules.titles.service import (
    CATEGORY_TAG,
    OUTCOME_CHANGE,
    close_reign,
    holders_of,
    load_title,
    names_by_id,
    record_defense,
    set_holders,
    title_outcome,
)


def resolve_match(save_id: int, match_id: int, winner_id: int, rating: int) -> Dict[str, Any]:
    with write_tx() as conn:
        save = load_save(conn, save_id)
        week = int(save["current_week"])
        match = load_match(conn, save_id, match_id)
        if match["is_completed"]:
            raise InvalidState("match already resolved", code="already_resolved", details={"match_id": match_id})

        teams = match_teams(conn, match_id)
        winning_index = next((i for i, members in teams.items() if winner_id in members), None)
        if winning_index is None:
            raise ValidationError(
                "winner is not a participant of this match",
                code="invalid_winner",
                details={"winner_id": winner_id, "participants_by_team": teams},
            )
        winning_team = teams[winning_index]
        losing_teams = {i: m for i, m in teams.items() if i != winning_index}
        losers = [w for members in losing_teams.values() for w in members]

        title = None
        outcome = None
        if match["is_title_match"] and match["title_id"] is not None:
            title = load_title(conn, save_id, int(match["title_id"]))
            outcome = title_outcome(holders_of(title), winning_team)
            if outcome is None:
                raise InvalidState(
                    "title holders are on both sides of the result",
                    code="ambiguous_title_holders",
                    details={"holders": holders_of(title), "winning_team": winning_team},
                )

        # -- all checks passed; mutate --
        now = now_iso()
        for wid in winning_team:
            conn.execute("UPDATE wrestlers SET wins = wins + 1, updated_at=? WHERE id=?;", (now, wid))
        for wid in losers:
            conn.execute("UPDATE wrestlers SET losses = losses + 1, updated_at=? WHERE id=?;", (now, wid))

        is_title_change = False
        if title is not None and outcome == OUTCOME_CHANGE:
            is_title_change = True
            close_reign(conn, title, week_lost=week, defeated_by=winning_team)
            holder2 = winning_team[1] if title["category"] == CATEGORY_TAG and len(winning_team) > 1 else None
            set_holders(conn, int(title["id"]), winning_team[0], holder2, week)
        elif title is not None:
            record_defense(conn, title, week=week, rating=rating)

        names = names_by_id(conn, winning_team + losers)
        winner_name = " & ".join(names.get(w, "?") for w in winning_team)
        loser_name = ", ".join(" & ".join(names.get(w, "?") for w in m) for m in losing_teams.values())

        log_id = insert(
            conn,
            "match_log",
            {
                "save_id": save_id,
                "week": week,
                "match_type": match["match_type"],
                "winner_id": winner_id,
                "winner_name": winner_name,
                "loser_name": loser_name,
                "rating": int(rating),
                "is_title_change": 1 if is_title_change else 0,
                "title_id": int(title["id"]) if title is not None else None,
                "title_name": title["name"] if title is not None else None,
                "planned_match_id": match_id,
                "created_at": now,
            },
        )
        _log_participants(conn, log_id, winning_index, winning_team, losing_teams)

        result_text = f"Winner: {winner_name} ({int(rating)}★)"
        if is_title_change:
            result_text += f" - NEW {title['name']}"
        elif title is not None:
            result_text += f" - retains {title['name']}"
        conn.execute(
            "UPDATE planned_matches SET is_completed=1, result_text=?, updated_at=? WHERE id=?;",
            (result_text, now, match_id),
        )

    emit(
        "INFO",
        "match.resolved",
        "match resolved",
        save_id=save_id,
        match_id=match_id,
        week=week,
        winner_id=winner_id,
        rating=int(rating),
        is_title_change=is_title_change,
    )
    if is_title_change:
        emit("INFO", "title.changed", "new champion", save_id=save_id, title_id=int(title["id"]), holders=winning_team, week=week)

    return {
        "success": True,
        "is_title_change": is_title_change,
        "match_id": match_id,
        "log_id": log_id,
        "result_text": result_text,
    }


def _log_participants(
    conn: sqlite3.Connection,
    log_id: int,
    winning_index: int,
    winning_team: List[int],
    losing_teams: Dict[int, List[int]],
) -> None:
    for wid in winning_team:
        insert(conn, "match_log_participants", {"log_id": log_id, "wrestler_id": wid, "role": "winner", "team_index": winning_index})
    for team_index, members in losing_teams.items():
        for wid in members:
            insert(conn, "match_log_participants", {"log_id": log_id, "wrestler_id": wid, "role": "loser", "team_index": team_index})
