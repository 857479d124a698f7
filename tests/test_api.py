"""
Tests for the practice engine FastAPI routes.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture(scope="module")
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


def _card(id_: str, **extra) -> dict:
    return {"id": id_, "front": f"front-{id_}", "back": f"back-{id_}", **extra}


def _start(client: TestClient, items: list[dict]) -> dict:
    r = client.post("/api/practice/sessions", json={"items": items})
    assert r.status_code == 201
    return r.json()


def test_health(client: TestClient):
    """GET /api/health returns ok and the number of sessions."""
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert isinstance(data["active_sessions"], int)


def test_grade_writing(client: TestClient):
    r = client.post(
        "/api/practice/grade/writing",
        json={"user_input": "runing", "correct_answer": "running"},
    )
    assert r.status_code == 200
    assert r.json() == {"grade": 4}


def test_grade_writing_requires_body(client: TestClient):
    r = client.post("/api/practice/grade/writing", json={})
    assert r.status_code == 422


def test_grade_ordering(client: TestClient):
    r = client.post(
        "/api/practice/grade/ordering",
        json={"moves_made": 10, "min_moves_possible": 5},
    )
    assert r.status_code == 200
    assert r.json() == {"grade": 2}


def test_grade_ordering_rejects_negative_moves(client: TestClient):
    r = client.post(
        "/api/practice/grade/ordering",
        json={"moves_made": -1, "min_moves_possible": 5},
    )
    assert r.status_code == 422
    assert "non-negative" in r.json()["detail"]


def test_next_review_from_existing_state(client: TestClient):
    r = client.post(
        "/api/practice/next-review",
        json={
            "grade": 5,
            "srsData": {"interval": 6, "repetition": 2, "easeFactor": 2.5, "dueDate": "2025-01-01"},
        },
    )
    assert r.status_code == 200
    data = r.json()
    assert data["srs_data"]["interval"] == 15
    assert data["srs_data"]["repetition"] == 3
    assert data["status"] == "learned"


def test_next_review_rejects_bad_grade(client: TestClient):
    r = client.post("/api/practice/next-review", json={"grade": 6})
    assert r.status_code == 422


def test_session_lifecycle(client: TestClient):
    started = _start(client, [_card("a"), _card("b", type="structure"), _card("c")])
    session_id = started["session_id"]
    assert started["status"] == "active"
    assert started["total_cards"] == 3
    assert started["current_card"]["id"] == "a"

    for grade in (5, 2, 4):
        r = client.post(f"/api/practice/sessions/{session_id}/review", json={"grade": grade})
        assert r.status_code == 200

    body = r.json()
    assert body["reviewed_card"]["id"] == "c"
    assert body["reviewed_card"]["srsData"]["interval"] == 1
    session = body["session"]
    assert session["status"] == "complete"
    assert session["is_session_complete"] is True
    assert session["completed_count"] == 3
    assert session["progress"] == 100
    assert session["current_card"] is None
    assert session["stats"]["correct"] == 2
    assert session["stats"]["incorrect"] == 1

    # Past completion the review is ignored.
    r = client.post(f"/api/practice/sessions/{session_id}/review", json={"grade": 5})
    assert r.status_code == 200
    assert r.json()["reviewed_card"] is None
    assert r.json()["session"]["completed_count"] == 3

    r = client.get(f"/api/practice/sessions/{session_id}/results")
    assert r.status_code == 200
    results = r.json()
    assert results["finished"] is True
    assert [row["grade"] for row in results["results"]] == [5, 2, 4]
    assert results["results"][1]["type"] == "structure"
    assert {card["id"] for card in results["updated_cards"]} == {"a", "b", "c"}

    r = client.delete(f"/api/practice/sessions/{session_id}")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "session_id": session_id}

    r = client.get(f"/api/practice/sessions/{session_id}")
    assert r.status_code == 404


def test_session_rejects_invalid_grade(client: TestClient):
    started = _start(client, [_card("a")])
    session_id = started["session_id"]

    r = client.post(f"/api/practice/sessions/{session_id}/review", json={"grade": 7})
    assert r.status_code == 422

    r = client.get(f"/api/practice/sessions/{session_id}")
    assert r.json()["completed_count"] == 0


def test_empty_session(client: TestClient):
    started = _start(client, [])
    assert started["current_card"] is None
    assert started["progress"] == 0
    assert started["is_session_complete"] is False


def test_unknown_session_returns_404(client: TestClient):
    r = client.post("/api/practice/sessions/missing/review", json={"grade": 3})
    assert r.status_code == 404
    r = client.delete("/api/practice/sessions/missing")
    assert r.status_code == 404


def test_next_review_with_low_ease_factor_setting(monkeypatch):
    monkeypatch.setenv("SRS_MIN_EASE_FACTOR", "1.0")

    with TestClient(app) as fresh_client:
        r = fresh_client.post(
            "/api/practice/next-review",
            json={
                "grade": 0,
                "srsData": {"interval": 1, "repetition": 0, "easeFactor": 1.3, "dueDate": "2025-01-01"},
            },
        )

    assert r.status_code == 200
    assert r.json()["srs_data"]["easeFactor"] == 1.3
