"""Smoke tests for API routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from japanese_progress.api.routes import router


@pytest.fixture
def client(tracker):
    app = FastAPI()
    app.include_router(router)
    app.state.tracker = tracker
    with TestClient(app) as c:
        yield c


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestProgress:
    def test_default_snapshot(self, client):
        response = client.get("/api/progress")
        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == "default_user"
        assert data["hiragana"] == []
        assert data["stats"]["level"] == "beginner"

    def test_reset(self, client):
        client.post("/api/progress/vocabulary", json={"key": "ねこ", "correct": True})
        response = client.delete("/api/progress")
        assert response.status_code == 200
        assert client.get("/api/progress").json()["vocabulary"] == []


class TestAnswers:
    def test_character_answer(self, client):
        response = client.post(
            "/api/progress/characters/hiragana", json={"key": "あ", "correct": True}
        )
        assert response.status_code == 200
        assert response.json() == {"key": "あ", "mastery": 10}
        mastery = client.get("/api/progress/mastery/hiragana/あ").json()
        assert mastery["mastery"] == 10

    def test_unknown_class(self, client):
        response = client.post(
            "/api/progress/characters/romaji", json={"key": "a", "correct": True}
        )
        assert response.status_code == 400
        assert client.get("/api/progress/review/romaji").status_code == 400

    def test_missing_key_field(self, client):
        response = client.post("/api/progress/characters/kanji", json={"correct": True})
        assert response.status_code == 422

    def test_vocabulary_answer(self, client):
        response = client.post(
            "/api/progress/vocabulary", json={"key": "みず", "correct": False}
        )
        assert response.json() == {"key": "みず", "mastery": 0}
        assert client.get("/api/progress/vocabulary/みず/mastery").json()["mastery"] == 0

    def test_review_lists(self, client, clock):
        client.post("/api/progress/characters/katakana", json={"key": "ア", "correct": True})
        assert client.get("/api/progress/review/katakana").json() == []
        clock.advance(days=1)
        assert client.get("/api/progress/review/katakana").json() == ["ア"]
        assert client.get("/api/progress/review-vocabulary").json() == []


class TestQuizzes:
    def test_record_quiz(self, client):
        response = client.post(
            "/api/progress/quizzes",
            json={"quizType": "hiragana", "score": 100, "totalQuestions": 10, "timeSpent": 42},
        )
        assert response.status_code == 200
        stats = response.json()
        assert stats["totalQuizzes"] == 1
        assert stats["xp"] == 100

    def test_invalid_quiz(self, client):
        response = client.post(
            "/api/progress/quizzes",
            json={"quizType": "hiragana", "score": 150, "totalQuestions": 10},
        )
        assert response.status_code == 400

    def test_summary(self, client):
        client.post(
            "/api/progress/quizzes",
            json={"quizType": "kanji", "score": 100, "totalQuestions": 5, "timeSpent": 30},
        )
        data = client.get("/api/progress/summary").json()
        assert data["xp"] == 100
        assert data["levelProgress"]["currentLevel"] == 2
        assert data["recentQuizzes"][0]["quizType"] == "kanji"
        assert [a["id"] for a in data["recentAchievements"]] == ["first_quiz", "perfect_score"]
