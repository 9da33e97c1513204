"""End-to-end HTTP tests through the FastAPI app against SQLite."""

import pytest
from fastapi.testclient import TestClient

from hoopstats.api import create_app
from hoopstats.database import Database
from hoopstats.errors import StorageError

pytestmark = pytest.mark.integration

API = "/api/v1"


@pytest.fixture
def client(test_settings):
    """Client with the lifespan running, so the schema and services exist."""
    with TestClient(create_app(test_settings)) as c:
        yield c


def _fields(response) -> dict[str, str]:
    return {fe["field"]: fe["message"] for fe in response.json()["field_errors"]}


def _team(client, name: str) -> dict:
    response = client.post(f"{API}/teams", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()


def _player(client, team_id: int, first_name: str = "Test") -> dict:
    response = client.post(
        f"{API}/players",
        json={"team_id": team_id, "first_name": first_name, "last_name": "Player", "position": "pg"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _game(client, home_id: int, away_id: int, status: str = "finished") -> dict:
    response = client.post(
        f"{API}/games",
        json={
            "season": "2023-24",
            "date": "2024-01-15T19:00:00Z",
            "home_team_id": home_id,
            "away_team_id": away_id,
            "status": status,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def _stat(client, player_id: int, game_id: int, **counters):
    return client.post(f"{API}/stats", json={"player_id": player_id, "game_id": game_id, **counters})


class TestHealth:
    @pytest.mark.parametrize("path", ["/live", f"{API}/health/live"])
    def test_liveness(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    @pytest.mark.parametrize("path", ["/ready", f"{API}/health/ready"])
    def test_readiness(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    def test_readiness_unavailable(self, client, monkeypatch):
        async def down(self):
            raise StorageError("database unavailable")

        monkeypatch.setattr(Database, "ping", down)

        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "unavailable"}


class TestTeams:
    def test_create_and_get(self, client):
        team = _team(client, "  Atlanta Hawks ")

        assert team["name"] == "Atlanta Hawks"
        response = client.get(f"{API}/teams/{team['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Atlanta Hawks"

    def test_duplicate_name(self, client):
        _team(client, "Hawks")

        response = client.post(f"{API}/teams", json={"name": "Hawks"})

        assert response.status_code == 409
        assert response.json()["error"] == "already_exists"

    def test_invalid_name(self, client):
        response = client.post(f"{API}/teams", json={"name": "A"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_input"
        assert _fields(response) == {"name": "length must be between 2 and 50"}

    def test_list(self, client):
        for name in ("Hawks", "Bulls", "Heat"):
            _team(client, name)

        response = client.get(f"{API}/teams", params={"limit": 2, "offset": 1})

        body = response.json()
        assert body["total"] == 3
        assert [t["name"] for t in body["items"]] == ["Bulls", "Heat"]

    def test_missing(self, client):
        response = client.get(f"{API}/teams/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_non_positive_id(self, client):
        response = client.get(f"{API}/teams/0")

        assert response.status_code == 400
        assert _fields(response) == {"id": "must be > 0"}

    def test_non_integer_id(self, client):
        response = client.get(f"{API}/teams/abc")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"
        assert "team_id" in _fields(response)

    def test_huge_offset_returns_empty_page(self, client):
        _team(client, "Hawks")

        response = client.get(f"{API}/teams", params={"offset": 10**20})

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 1}

    def test_oversized_id(self, client):
        response = client.get(f"{API}/teams/{2**40}")

        assert response.status_code == 400
        assert _fields(response) == {"id": "must be <= 2147483647"}

    def test_roster(self, client):
        hawks = _team(client, "Hawks")
        bulls = _team(client, "Bulls")
        _player(client, hawks["id"], "Trae")
        _player(client, bulls["id"], "Zach")

        response = client.get(f"{API}/teams/{hawks['id']}/players")

        body = response.json()
        assert body["total"] == 1
        assert body["items"][0]["first_name"] == "Trae"
        assert body["items"][0]["position"] == "PG"


class TestPlayersAndGames:
    def test_create_player_reports_all_structural_errors(self, client):
        response = client.post(
            f"{API}/players",
            json={"team_id": 0, "first_name": " ", "last_name": "Young", "position": "QB"},
        )

        assert response.status_code == 400
        assert set(_fields(response)) == {"team_id", "first_name", "position"}

    def test_create_player_unknown_team(self, client):
        response = client.post(
            f"{API}/players",
            json={"team_id": 41, "first_name": "Trae", "last_name": "Young", "position": "PG"},
        )

        assert response.status_code == 400
        assert _fields(response) == {"team_id": "team does not exist"}

    def test_create_game_same_teams(self, client):
        hawks = _team(client, "Hawks")

        response = client.post(
            f"{API}/games",
            json={
                "season": "2023-24",
                "date": "2024-01-15T19:00:00Z",
                "home_team_id": hawks["id"],
                "away_team_id": hawks["id"],
                "status": "scheduled",
            },
        )

        assert response.status_code == 400
        assert _fields(response) == {"teams": "home and away must differ"}

    def test_create_game_bad_season_and_missing_date(self, client):
        response = client.post(
            f"{API}/games",
            json={"season": "2023-2024", "home_team_id": 1, "away_team_id": 2},
        )

        assert response.status_code == 400
        assert _fields(response) == {
            "date": "must be set",
            "season": "invalid format, expected YYYY-YY",
        }

    def test_list_and_get_games(self, client):
        hawks = _team(client, "Hawks")
        bulls = _team(client, "Bulls")
        game = _game(client, hawks["id"], bulls["id"], status="Scheduled")

        assert game["status"] == "scheduled"
        assert client.get(f"{API}/games/{game['id']}").json()["season"] == "2023-24"
        assert client.get(f"{API}/games").json()["total"] == 1

    def test_malformed_body(self, client):
        response = client.post(
            f"{API}/teams", content="{not json", headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"


class TestStatsAndAggregates:
    @pytest.fixture
    def matchup(self, client):
        hawks = _team(client, "Hawks")
        bulls = _team(client, "Bulls")
        trae = _player(client, hawks["id"], "Trae")
        zach = _player(client, bulls["id"], "Zach")
        return hawks, bulls, trae, zach

    def test_upsert_twice_keeps_one_line(self, client, matchup):
        hawks, bulls, trae, _ = matchup
        game = _game(client, hawks["id"], bulls["id"])

        first = _stat(client, trae["id"], game["id"], points=10)
        second = _stat(client, trae["id"], game["id"], points=27, assists=11)

        assert first.status_code == second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        lines = client.get(f"{API}/games/{game['id']}/stats").json()
        assert len(lines) == 1
        assert lines[0]["points"] == 27
        assert lines[0]["assists"] == 11

    def test_upsert_unknown_player_and_game(self, client):
        response = _stat(client, 5, 6, points=1)

        assert response.status_code == 400
        assert _fields(response) == {
            "player_id": "player does not exist",
            "game_id": "game does not exist",
        }

    def test_upsert_out_of_range(self, client):
        response = _stat(client, 1, 1, fouls=7, minutes_played=49)

        assert response.status_code == 400
        assert set(_fields(response)) == {"fouls", "minutes_played"}

    def test_upsert_oversized_counter(self, client, matchup):
        hawks, bulls, trae, _ = matchup
        game = _game(client, hawks["id"], bulls["id"])

        response = _stat(client, trae["id"], game["id"], points=10**20)

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"
        assert set(_fields(response)) == {"points"}

    def test_player_aggregates(self, client, matchup):
        hawks, bulls, trae, _ = matchup
        for points in (25, 30):
            game = _game(client, hawks["id"], bulls["id"])
            _stat(client, trae["id"], game["id"], points=points)

        response = client.get(f"{API}/players/{trae['id']}/aggregates", params={"season": "2023-24"})

        assert response.status_code == 200
        body = response.json()
        assert body["games_played"] == 2
        assert body["total_points"] == 55
        assert body["avg_points"] == 27.5

    def test_team_aggregates_and_alias(self, client, matchup):
        hawks, bulls, trae, zach = matchup
        for home_points, away_points in ((25, 20), (30, 35), (22, 18)):
            game = _game(client, hawks["id"], bulls["id"])
            _stat(client, trae["id"], game["id"], points=home_points)
            _stat(client, zach["id"], game["id"], points=away_points)

        career = client.get(f"{API}/teams/{hawks['id']}/aggregates", params={"career": "true"})
        alias = client.get(f"{API}/teams/{hawks['id']}/stats/aggregate")

        assert career.status_code == alias.status_code == 200
        assert career.json() == alias.json()
        assert career.json()["wins"] == 2
        assert career.json()["losses"] == 1
        assert career.json()["total_points_scored"] == 77
        assert career.json()["total_points_allowed"] == 73

    def test_season_and_career_are_exclusive(self, client, matchup):
        _, _, trae, _ = matchup

        response = client.get(
            f"{API}/players/{trae['id']}/aggregates", params={"season": "2023-24", "career": "1"}
        )

        assert response.status_code == 400
        assert _fields(response) == {
            "query": "'season' and 'career' parameters are mutually exclusive"
        }

    def test_bad_season_format(self, client, matchup):
        hawks = matchup[0]

        response = client.get(f"{API}/teams/{hawks['id']}/aggregates", params={"season": "2023"})

        assert response.status_code == 400
        assert _fields(response) == {"season": "must be in YYYY-YY format"}

    def test_missing_player_aggregates(self, client):
        response = client.get(f"{API}/players/404/aggregates")

        assert response.status_code == 404
