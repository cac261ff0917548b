"""Tests for team generation API routes."""

import httpx
import pytest

from roster_balancer.main import app

pytestmark = pytest.mark.anyio


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


ROSTER = [
    {"id": 1, "first_name": "A", "last_name": "One", "skill": 9},
    {"id": 2, "first_name": "B", "last_name": "Two", "skill": 5},
    {"id": 3, "first_name": "C", "last_name": "Three", "skill": 7},
    {"id": 4, "first_name": "D", "last_name": "Four", "skill": 8, "is_defense": True},
    {"id": 5, "first_name": "E", "last_name": "Five", "skill": 10, "is_attending": False},
]


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestGenerateTeams:
    """Tests for POST /api/teams/generate."""

    async def test_generate_splits_attending_players(self, client):
        response = await client.post("/api/teams/generate", json={"players": ROSTER})

        assert response.status_code == 200
        data = response.json()
        red, white = data["teams"]["red"], data["teams"]["white"]
        assert [p["id"] for p in red["forwards"]] == [1, 2]
        assert [p["id"] for p in white["forwards"]] == [3]
        assert [p["id"] for p in red["defensemen"]] == [4]
        assert white["defensemen"] == []
        assert data["stats"]["red"]["total_players"] == 3
        assert data["stats"]["white"]["average_skill"] == 7.0

    async def test_generate_with_group_code(self, client):
        players = [
            {**ROSTER[0], "group_code": "tue"},
            {**ROSTER[1], "group_code": "thu"},
        ]

        response = await client.post(
            "/api/teams/generate", json={"players": players, "group_code": "tue"}
        )

        data = response.json()
        assert [p["id"] for p in data["teams"]["red"]["forwards"]] == [1]
        assert data["teams"]["white"]["forwards"] == []
        assert data["teams"]["red"]["group_code"] == "tue"

    async def test_generate_rejects_missing_skill(self, client):
        response = await client.post(
            "/api/teams/generate",
            json={"players": [{"id": 1, "first_name": "A"}]},
        )

        assert response.status_code == 422

    async def test_empty_roster(self, client):
        response = await client.post("/api/teams/generate", json={"players": []})

        assert response.status_code == 200
        assert response.json()["stats"]["red"]["average_skill"] == 0


class TestTeamStats:
    """Tests for POST /api/teams/stats."""

    async def test_stats_for_stored_teams(self, client):
        body = {
            "red": {
                "forwards": [ROSTER[0], ROSTER[1]],
                "defensemen": [],
            },
            "white": {"forwards": [], "defensemen": []},
        }

        response = await client.post("/api/teams/stats", json=body)

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["red"] == {
            "total_players": 2,
            "average_skill": 7.0,
            "forwards_count": 2,
            "defense_count": 0,
        }
        assert stats["white"]["average_skill"] == 0


class TestAnalysis:
    """Tests for GET /api/teams/analysis."""

    async def test_analysis_of_sample_roster(self, client):
        response = await client.get("/api/teams/analysis", params={"iterations": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["bulk_analysis"]["iterations"] == 10
        assert len(data["bulk_analysis"]["unique_compositions"]) == 1

    async def test_analysis_rejects_zero_iterations(self, client):
        response = await client.get("/api/teams/analysis", params={"iterations": 0})

        assert response.status_code == 422
