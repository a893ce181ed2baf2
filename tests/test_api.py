# tests/test_api.py

"""
API Endpoint Tests - Tests for all FastAPI endpoints
"""

import pytest
from fastapi import status

from app.core.dependencies import get_scoring_service
from app.core.exceptions import DatabaseConnectionException
from app.main import app



# SCORE ENDPOINT TESTS


class TestScoreEndpoint:
    """Tests for GET /api/v1/researchers/{user_id}/score endpoint."""

    def test_get_score_success(self, client):
        response = client.get("/api/v1/researchers/1/score")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["totalPoints"] == 44
        assert data["summary"]["research"] == 32
        assert data["summary"]["conferences"] == 12
        assert len(data["breakdown"]) == 14

    def test_breakdown_items(self, client):
        data = client.get("/api/v1/researchers/3/score").json()
        letter = data["breakdown"]["thankYouBooks"][0]
        assert letter["points"] == 6
        assert letter["details"] == {"sourceType": "ministry"}
        assert letter["year"] == 2023

    def test_get_score_with_date_range(self, client):
        response = client.get("/api/v1/researchers/2/score", params={"start": "2024-01-01", "end": "2025-01-01"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["totalPoints"] == 17

    def test_date_range_needs_both_bounds(self, client):
        response = client.get("/api/v1/researchers/2/score", params={"start": "2024-01-01"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_inverted_date_range(self, client):
        response = client.get("/api/v1/researchers/2/score", params={"start": "2025-01-01", "end": "2024-01-01"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_invalid_date(self, client):
        response = client.get("/api/v1/researchers/2/score", params={"start": "yesterday", "end": "2024-01-01"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_unknown_researcher(self, client):
        response = client.get("/api/v1/researchers/999/score")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["error_code"] == "RESEARCHER_NOT_FOUND"
        assert data["details"] == {"entity_id": 999}

    def test_non_integer_id(self, client):
        response = client.get("/api/v1/researchers/abc/score")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY



# RANK ENDPOINT TESTS


class TestRankEndpoint:
    """Tests for GET /api/v1/researchers/{user_id}/rank endpoint."""

    def test_get_rank_success(self, client):
        response = client.get("/api/v1/researchers/2/rank")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["population_rank"] == 2
        assert data["population_size"] == 4
        assert data["subgroup_rank"] == 2
        assert data["department"] == "PHYS"
        assert [e["id"] for e in data["top3"]] == [1, 2, 3]
        assert data["subgroup_top5"][0]["summary"]["research"] == 32

    def test_unknown_researcher(self, client):
        response = client.get("/api/v1/researchers/999/rank")
        assert response.status_code == status.HTTP_404_NOT_FOUND



# LEADERBOARD ENDPOINT TESTS


class TestRankingEndpoints:

    def test_top_researchers(self, client):
        response = client.get("/api/v1/rankings/top-researchers", params={"limit": 2})
        assert response.status_code == status.HTTP_200_OK
        assert [e["id"] for e in response.json()] == [1, 2]

    def test_top_researchers_rejects_zero_limit(self, client):
        response = client.get("/api/v1/rankings/top-researchers", params={"limit": 0})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_top_departments(self, client):
        data = client.get("/api/v1/rankings/top-departments").json()
        assert [d["code"] for d in data] == ["PHYS", "CHEM"]
        assert data[0]["avg_points"] == 34.0

    def test_criteria(self, client):
        response = client.get("/api/v1/rankings/criteria", params={"limit": 2})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert set(data) == {
            "academicTitle", "publishedResearch", "globalResearch", "conferences",
            "seminarsAndCourses", "committees", "volunteerWork", "thankYouBooks",
        }
        assert data["academicTitle"][0]["value"] == "professor"
        assert data["committees"][0]["id"] == 2

    def test_average_points(self, client):
        data = client.get("/api/v1/stats/average-points").json()
        assert data == {"researchers_count": 4, "total_points": 79, "avg_points": 19.75}



# ERROR MAPPING TESTS


class TestStoreUnavailable:

    def test_directory_failure_returns_503(self, client):
        class BrokenService:
            async def top_researchers(self, limit):
                raise DatabaseConnectionException("Failed to connect to Snowflake")

        app.dependency_overrides[get_scoring_service] = lambda: BrokenService()
        response = client.get("/api/v1/rankings/top-researchers")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error_code"] == "STORE_UNAVAILABLE"



# HEALTH AND ROOT


class TestHealthEndpoint:

    def test_health_with_memory_backend(self, client):
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["dependencies"] == {"snowflake": "disabled", "redis": "disabled"}

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"
