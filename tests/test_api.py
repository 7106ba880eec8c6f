"""Tests for the HTTP API."""

import pytest
from httpx import ASGITransport, AsyncClient

from studyhub.main import app

CONTEXT = {"current_grade": 85, "total_points": 1000, "earned_points": 850, "completed_weight": 0.85}


def make_client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


# --- Analytics ---


@pytest.mark.asyncio
async def test_describe() -> None:
    async with make_client() as client:
        response = await client.post(
            "/api/analytics/describe", json={"values": [2, 4, 4, 4, 5, 5, 7, 9]}
        )
    assert response.status_code == 200
    body = response.json()
    assert body["mean"] == 5.0
    assert body["std_dev"] == 2.0
    assert body["range"] == 7


@pytest.mark.asyncio
async def test_describe_empty_is_insufficient_data() -> None:
    async with make_client() as client:
        response = await client.post("/api/analytics/describe", json={"values": []})
    assert response.status_code == 422
    assert response.json()["error"] == "insufficient_data"


@pytest.mark.asyncio
async def test_correlation() -> None:
    async with make_client() as client:
        response = await client.post(
            "/api/analytics/correlation",
            json={"x": [1, 2, 3, 4, 5], "y": [2, 1, 4, 3, 5]},
        )
    assert response.status_code == 200
    body = response.json()
    assert body["r"] == pytest.approx(0.8)
    assert body["n"] == 5
    assert body["significance"] == "not significant"


@pytest.mark.asyncio
async def test_correlation_errors() -> None:
    async with make_client() as client:
        mismatch = await client.post("/api/analytics/correlation", json={"x": [1, 2, 3], "y": [1, 2]})
        flat = await client.post("/api/analytics/correlation", json={"x": [1, 1, 1], "y": [1, 2, 3]})
    assert mismatch.status_code == 422
    assert mismatch.json()["error"] == "invalid_input"
    assert flat.status_code == 422
    assert flat.json()["error"] == "degenerate_input"


@pytest.mark.asyncio
async def test_regression_and_trend() -> None:
    async with make_client() as client:
        regression = await client.post(
            "/api/analytics/regression", json={"x": [1, 2, 3], "y": [5, 7, 9]}
        )
        trend = await client.post(
            "/api/analytics/trend", json={"values": [70, 74, 79, 85], "window": 2}
        )
    assert regression.json()["slope"] == pytest.approx(2.0)
    body = trend.json()
    assert body["direction"] == "improving"
    assert body["moving_average"] == [70, 72, 76.5, 82]


# --- Planner ---


@pytest.mark.asyncio
async def test_impact() -> None:
    async with make_client() as client:
        response = await client.post(
            "/api/planner/impact", json={"points_possible": 100, "context": CONTEXT}
        )
    assert response.status_code == 200
    body = response.json()
    assert body["priority"] == "high"
    assert body["grade_change_range"] == {"min": 85, "max": 95}
    assert body["target_score_for"]["B"] is None


@pytest.mark.asyncio
async def test_impact_negative_points() -> None:
    async with make_client() as client:
        response = await client.post(
            "/api/planner/impact", json={"points_possible": -1, "context": CONTEXT}
        )
    assert response.status_code == 422
    assert response.json()["error"] == "invalid_input"


@pytest.mark.asyncio
async def test_impacts_ranked() -> None:
    assignments = [
        {"id": "quiz", "name": "Quiz", "points_possible": 20, "due_at": "2025-11-08T00:00:00"},
        {"id": "undated", "name": "Reading", "points_possible": 100},
        {"id": "essay", "name": "Essay", "points_possible": 100, "due_at": "2025-11-09T00:00:00"},
    ]
    async with make_client() as client:
        response = await client.post(
            "/api/planner/impacts", json={"assignments": assignments, "context": CONTEXT}
        )
    assert response.status_code == 200
    assert [item["assignment_id"] for item in response.json()] == ["essay", "undated", "quiz"]


@pytest.mark.asyncio
async def test_impacts_mixed_timezones() -> None:
    assignments = [
        {"id": "aware", "name": "Lab", "points_possible": 100, "due_at": "2025-11-10T00:00:00Z"},
        {"id": "naive", "name": "Essay", "points_possible": 100, "due_at": "2025-11-09T00:00:00"},
        {"id": "offset", "name": "Quiz", "points_possible": 100, "due_at": "2025-11-09T20:00:00-05:00"},
    ]
    async with make_client() as client:
        response = await client.post(
            "/api/planner/impacts", json={"assignments": assignments, "context": CONTEXT}
        )
    assert response.status_code == 200
    body = response.json()
    assert [item["assignment_id"] for item in body] == ["naive", "aware", "offset"]
    # Due dates come back as naive UTC
    assert body[2]["due_at"] == "2025-11-10T01:00:00"


# --- Flashcards ---


@pytest.mark.asyncio
async def test_flashcard_review_cycle(db_ready) -> None:
    async with make_client() as client:
        created = await client.post(
            "/api/flashcards", json={"front": "mitochondria", "back": "powerhouse", "deck": "bio"}
        )
        assert created.status_code == 201
        card = created.json()
        assert card["interval"] == 0
        assert card["ease_factor"] == 2.5
        assert card["next_review"] is None

        due = await client.get("/api/flashcards/due", params={"deck": "bio"})
        assert card["id"] in [c["id"] for c in due.json()]

        first = await client.post(f"/api/flashcards/{card['id']}/review", json={"quality": 5})
        assert first.status_code == 200
        assert first.json()["interval"] == 1
        assert first.json()["review_count"] == 1

        second = await client.post(
            f"/api/flashcards/{card['id']}/review", json={"correct": True, "confidence": 5}
        )
        assert second.json()["quality"] == 5
        assert second.json()["interval"] == 6

        due = await client.get("/api/flashcards/due", params={"deck": "bio"})
        assert card["id"] not in [c["id"] for c in due.json()]


@pytest.mark.asyncio
async def test_flashcard_review_errors(db_ready) -> None:
    async with make_client() as client:
        created = await client.post("/api/flashcards", json={"front": "q", "back": "a"})
        card_id = created.json()["id"]

        missing = await client.post("/api/flashcards/999999/review", json={"quality": 3})
        bad_quality = await client.post(f"/api/flashcards/{card_id}/review", json={"quality": 7})
        empty = await client.post(f"/api/flashcards/{card_id}/review", json={})

    assert missing.status_code == 404
    assert bad_quality.status_code == 422
    assert bad_quality.json()["error"] == "invalid_input"
    assert empty.status_code == 422
