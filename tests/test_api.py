"""HTTP API tests using FastAPI's TestClient."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np
import pytest
from fastapi.testclient import TestClient

from golazo.api import server
from golazo.betting.service import BettingService
from golazo.betting.store import Store

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}


def _teams() -> list[dict[str, object]]:
    return [
        {"name": "Boca Juniors (D1)", "league": "D1", "position": 1, "lastFiveMatches": "WWWWW", "originalName": "Boca Juniors"},
        {"name": "Racing Club (D2)", "league": "D2", "position": 20, "lastFiveMatches": "LLLLL", "originalName": "Racing Club"},
        {"name": "Barrio FC", "league": "CUSTOM"},
    ]


@pytest.fixture()
def service() -> BettingService:
    return BettingService(Store(), rng=np.random.default_rng(11))


@pytest.fixture()
def client(service: BettingService, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    monkeypatch.setenv("GOLAZO_API_KEY", API_KEY)
    server.app.dependency_overrides[server.get_service] = lambda: service
    with TestClient(server.app) as test_client:
        yield test_client
    server.app.dependency_overrides.clear()


def _create_match(client: TestClient) -> dict[str, object]:
    client.post("/teams", json=_teams(), headers=HEADERS)
    response = client.post("/matches", json={"team1": "boca", "team2": "racing"}, headers=HEADERS)
    assert response.status_code == 201
    return response.json()


def test_health_is_public(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_requests_without_key_are_rejected(client: TestClient) -> None:
    assert client.get("/matches").status_code == 401
    assert client.get("/matches", headers={"X-API-Key": "wrong"}).status_code == 401


def test_load_teams_and_quote_odds(client: TestClient) -> None:
    loaded = client.post("/teams", json=_teams(), headers=HEADERS)
    assert loaded.json() == {"loaded": 3}

    response = client.get(
        "/odds",
        params={"team1": "Boca Juniors (D1)", "team2": "Racing Club (D2)"},
        headers=HEADERS,
    )
    assert response.status_code == 200
    assert response.json() == {"team1": 1.01, "draw": 15.0, "team2": 50.0}

    missing = client.get("/odds", params={"team1": "Boca Juniors (D1)", "team2": "Nobody"}, headers=HEADERS)
    assert missing.status_code == 404


def test_team_search_suggests_names(client: TestClient) -> None:
    client.post("/teams", json=_teams(), headers=HEADERS)
    response = client.get("/teams/search", params={"q": "boca"}, headers=HEADERS)
    assert [team["name"] for team in response.json()] == ["Boca Juniors (D1)"]


def test_match_lifecycle(client: TestClient, service: BettingService) -> None:
    match = _create_match(client)
    match_id = match["id"]
    assert match["status"] == "upcoming"

    listed = client.get("/matches", headers=HEADERS).json()
    assert [m["id"] for m in listed] == [match_id]

    board = client.get(f"/matches/{match_id}/odds", headers=HEADERS).json()
    assert board["basic"] == match["odds"]
    assert len(board["exact_scores"]) == 16

    bet = client.post(
        "/bets",
        json={"user_id": "u1", "match_id": match_id, "prediction": "team1", "amount": 100},
        headers=HEADERS,
    )
    assert bet.status_code == 201
    assert bet.json()["new_balance"] == pytest.approx(900.0)

    result = client.post(
        f"/matches/{match_id}/result",
        json={"result": "team1", "score1": 3, "score2": 0},
        headers=HEADERS,
    )
    assert result.status_code == 200
    body = result.json()
    assert body["score"] == "3-0"
    assert body["verdicts"][0]["won"] is True
    assert body["balances"]["u1"] == pytest.approx(900.0 + 100 * match["odds"]["team1"])

    again = client.post(
        f"/matches/{match_id}/result",
        json={"result": "team1", "score1": 1, "score2": 0},
        headers=HEADERS,
    )
    assert again.status_code == 409

    finished = client.get("/matches/finished", headers=HEADERS).json()
    assert finished[0]["score"] == "3-0"
    assert client.get("/users/u1/stats", headers=HEADERS).json()["won_bets"] == 1


def test_special_bets_over_http(client: TestClient) -> None:
    match_id = _create_match(client)["id"]
    exact = client.post(
        "/bets/special",
        json={"user_id": "u1", "match_id": match_id, "bet_type": "exact_score", "home": 2, "away": 0, "amount": 10},
        headers=HEADERS,
    )
    assert exact.status_code == 201
    assert exact.json()["selection"] == {"exactScore": {"home": 2, "away": 0}}

    combined = client.post(
        "/bets/special",
        json={
            "user_id": "u1",
            "match_id": match_id,
            "bet_type": "special_combined",
            "special_bets": ["both_teams_score", "header_goal"],
            "amount": 10,
        },
        headers=HEADERS,
    )
    assert combined.status_code == 201
    assert len(combined.json()["selection"]["specialBets"]) == 2

    unknown = client.post(
        "/bets/special",
        json={"user_id": "u1", "match_id": match_id, "bet_type": "special", "special_type": "own_goal", "amount": 10},
        headers=HEADERS,
    )
    assert unknown.status_code == 400

    bets = client.get("/users/u1/bets", headers=HEADERS).json()
    assert len(bets) == 2


def test_core_errors_map_to_status_codes(client: TestClient) -> None:
    match_id = _create_match(client)["id"]
    broke = client.post(
        "/bets",
        json={"user_id": "u1", "match_id": match_id, "prediction": "draw", "amount": 5000},
        headers=HEADERS,
    )
    assert broke.status_code == 400
    missing = client.post(
        "/bets",
        json={"user_id": "u1", "match_id": "nope", "prediction": "draw", "amount": 5},
        headers=HEADERS,
    )
    assert missing.status_code == 404
    mismatched = client.post(
        f"/matches/{match_id}/result",
        json={"result": "draw", "score1": 2, "score2": 0},
        headers=HEADERS,
    )
    assert mismatched.status_code == 400


def test_delete_match_refunds(client: TestClient, service: BettingService) -> None:
    match_id = _create_match(client)["id"]
    client.post(
        "/bets",
        json={"user_id": "u1", "match_id": match_id, "prediction": "draw", "amount": 40},
        headers=HEADERS,
    )
    response = client.delete(f"/matches/{match_id}", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["refunds"] == {"u1": 40.0}
    assert service.balance("u1") == pytest.approx(1000.0)
    assert client.delete(f"/matches/{match_id}", headers=HEADERS).status_code == 404


def test_simulate_and_stats(client: TestClient) -> None:
    match_id = _create_match(client)["id"]
    simulated = client.post(f"/matches/{match_id}/simulate", headers=HEADERS)
    assert simulated.status_code == 200
    assert simulated.json()["is_manual"] is False
    assert client.post(f"/matches/{match_id}/simulate", headers=HEADERS).status_code == 409

    stats = client.get("/stats", headers=HEADERS).json()
    assert stats["finished_matches"] == 1
    assert client.post("/matches/clear-finished", headers=HEADERS).json() == {"cleared": 1}


def test_transfers_and_leaderboard(client: TestClient, service: BettingService) -> None:
    service.register_user("u1", "Ana")
    service.register_user("u2", "Beto")
    moved = client.post("/transfers", json={"from_user": "u1", "to_user": "u2", "amount": 250}, headers=HEADERS)
    assert moved.json() == {"from_balance": 750.0, "to_balance": 1250.0}

    board = client.get("/leaderboard", headers=HEADERS).json()
    assert [row["user_id"] for row in board] == ["u2", "u1"]


def test_admin_only_routes(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(server.get_settings(), "admin_ids", ["boss"])
    denied = client.post("/grants", json={"actor_id": "u1", "to_user": "u1", "amount": 100}, headers=HEADERS)
    assert denied.status_code == 403
    granted = client.post("/grants", json={"actor_id": "boss", "to_user": "u1", "amount": 100}, headers=HEADERS)
    assert granted.json() == {"to_balance": 1100.0}
