from __future__ import annotations

from fastapi.testclient import TestClient


def _setup_card(client: TestClient) -> tuple:
    sid = client.post("/saves", json={"name": "HTTP Career", "brand": "NXT"}).json()["id"]
    ids = []
    for name in ("Ace", "Blaze"):
        r = client.post(f"/saves/{sid}/wrestlers", json={"name": name, "gender": "Male", "alignment": "Face", "is_permanent": True})
        assert r.status_code == 200
        ids.append(r.json()["id"])
    r = client.post(f"/saves/{sid}/show/matches", json={"match_type": "1 vs 1", "participants_by_team": {"0": [ids[0]], "1": [ids[1]]}, "cost": 6000, "stipulation": "Tables"})
    assert r.status_code == 200
    return sid, ids, r.json()["id"]


def test_health_reports_db_and_echoes_request_id(client: TestClient) -> None:
    r = client.get("/health", headers={"X-Request-Id": "REQ-1"})

    assert r.status_code == 200
    assert r.headers["X-Request-Id"] == "REQ-1"
    body = r.json()
    assert body["status"] == "ok"
    assert body["db"]["status"] == "ok"


def test_catalog_lists_formats_and_costs(client: TestClient) -> None:
    body = client.get("/catalog").json()

    assert [f["name"] for f in body["match_formats"]] == ["1 vs 1", "Tag Team", "Triple Threat", "Fatal 4-Way"]
    assert body["interference_cost"] == 2000
    r = client.get("/catalog/cost", params={"match_type": "1 vs 1", "stipulation": "Steel Cage", "interference": True})
    assert r.json()["cost"] == 44_000


def test_missing_save_uses_error_envelope(client: TestClient) -> None:
    r = client.get("/saves/999")

    assert r.status_code == 404
    body = r.json()
    assert body["error"] == "not_found"
    assert body["request_id"] == r.headers["X-Request-Id"]
    assert body["details"] == {"save_id": 999}


def test_save_lifecycle(client: TestClient) -> None:
    created = client.post("/saves", json={"name": "Mine", "brand": "ECW"}).json()

    assert created["theme_color"] == "#10B981"
    assert [s["id"] for s in client.get("/saves").json()["items"]] == [created["id"]]
    assert client.delete(f"/saves/{created['id']}").json() == {"id": created["id"], "deleted": True}
    assert client.get(f"/saves/{created['id']}").status_code == 404


def test_rating_out_of_range_is_a_validation_error(client: TestClient) -> None:
    sid, ids, mid = _setup_card(client)

    r = client.post(f"/saves/{sid}/show/matches/{mid}/resolve", json={"winner_id": ids[0], "rating": 6})

    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_full_week_over_http(client: TestClient) -> None:
    sid, ids, mid = _setup_card(client)
    assert client.get(f"/saves/{sid}/show/cost").json()["cost"] == 6000

    r = client.post(f"/saves/{sid}/weeks/close", json={"network": 1000})
    assert r.status_code == 409
    assert r.json()["error"] == "show_incomplete"

    r = client.post(f"/saves/{sid}/show/matches/{mid}/resolve", json={"winner_id": ids[0], "rating": 4})
    assert r.json()["success"] is True

    again = client.post(f"/saves/{sid}/show/matches/{mid}/resolve", json={"winner_id": ids[1], "rating": 4})
    assert again.status_code == 409
    assert again.json()["error"] == "already_resolved"

    closed = client.post(f"/saves/{sid}/weeks/close", json={"network": 10_000, "tickets": 5_000}).json()
    assert closed["current_week"] == 2
    assert closed["current_cash"] == 2_750_000 + 15_000 - 6_000

    logs = client.get(f"/saves/{sid}/weeks/1/matches").json()["items"]
    assert logs[0]["participants"] == {"winner": [ids[0]], "losers": [ids[1]]}
    assert client.get(f"/saves/{sid}/weeks").json()["items"][0]["avg_rating"] == 4.0
    assert client.get(f"/saves/{sid}/show").json()["items"] == []

    dash = client.get(f"/saves/{sid}/dashboard").json()
    assert dash["current_week"] == 2
    assert dash["news"][0]["type"] == "INFO"


def test_reorder_and_patch_over_http(client: TestClient) -> None:
    sid, ids, mid = _setup_card(client)
    second = client.post(f"/saves/{sid}/show/matches", json={"match_type": "Promo: Call Out", "participants_by_team": {"0": [ids[1]], "1": [ids[0]]}, "cost": 3000}).json()

    r = client.put(f"/saves/{sid}/show/order", json={"match_ids": [second["id"], mid]})
    assert [m["id"] for m in r.json()["items"]] == [second["id"], mid]

    r = client.patch(f"/saves/{sid}/show/matches/{mid}", json={"cost": 0, "stipulation": "Normal"})
    assert (r.json()["cost"], r.json()["stipulation"]) == (0, "Normal")

    assert client.delete(f"/saves/{sid}/show/matches/{second['id']}").json()["deleted"] is True
    assert [m["id"] for m in client.get(f"/saves/{sid}/show").json()["items"]] == [mid]


def test_titles_and_manual_finance_over_http(client: TestClient) -> None:
    sid, ids, _mid = _setup_card(client)
    world = next(t for t in client.get(f"/saves/{sid}/titles").json()["items"] if t["name"] == "NXT Championship")

    r = client.post(f"/saves/{sid}/titles/{world['id']}/assign", json={"holder1_id": ids[0]})
    assert r.json()["holder1_name"] == "Ace"
    hist = client.get(f"/saves/{sid}/titles/{world['id']}/history").json()
    assert hist["reigns"] == [] and hist["title"]["defenses"] == 0

    r = client.post(f"/saves/{sid}/finances/transactions", json={"kind": "OUT", "amount": 500, "category": "Fine"})
    assert r.json()["current_cash"] == 2_750_000 - 500
    assert client.get(f"/saves/{sid}/finances").json()["expenses"] == 500
    assert len(client.get(f"/saves/{sid}/finances/transactions").json()["items"]) == 1

    r = client.post(f"/saves/{sid}/wrestlers/{ids[0]}/renew", json={"weeks": 5, "cost": 10})
    assert r.status_code == 409
    assert r.json()["error"] == "invalid_contract"
