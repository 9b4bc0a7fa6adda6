"""Tests for the HTTP API."""

import json
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from interview_tracker.api.main import create_app
from interview_tracker.evaluation.gateway import AIGateway
from interview_tracker.evaluation.service import AnswerEvaluationService, HeuristicAnswerEvaluator
from interview_tracker.storage.memory import InMemoryDocumentStore

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
AUTH = {"Authorization": "Bearer user-1"}
OTHER_AUTH = {"Authorization": "Bearer user-2"}


def question(score, category="Technical"):
    return {
        "questionText": "Explain database indexing",
        "userAnswer": "B-trees speed up lookups",
        "score": score,
        "feedback": "Good",
        "category": category,
    }


@pytest.fixture
def client():
    app = create_app(
        store=InMemoryDocumentStore(),
        evaluation_service=AnswerEvaluationService(evaluators=[HeuristicAnswerEvaluator()]),
        clock=lambda: NOW,
    )
    with TestClient(app) as test_client:
        yield test_client


class TestHealthAndAuth:
    """Test cases for health checks and identity."""

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["components"]["ai_backend"] == "fallback"

    def test_missing_identity_is_401(self, client):
        response = client.get("/api/v1/interviews")
        assert response.status_code == 401
        assert response.json()["error"] == "HTTPException"

    def test_roles_listing_is_public_and_seeded(self, client):
        response = client.get("/api/v1/interview-roles")
        assert response.status_code == 200
        names = {role["name"] for role in response.json()}
        assert "Frontend Developer" in names
        assert len(names) == 5
        assert "aiPrompt" in response.json()[0]["categories"][0]


class TestEvaluationEndpoints:
    """Test cases for answer evaluation and question generation."""

    def test_evaluate_answer_falls_back(self, client):
        response = client.post(
            "/api/v1/interview-roles/evaluate-answer",
            json={"question": "What is a REST API?", "answer": "An api over HTTP", "role": "Backend Developer",
                  "category": "Technical"},
            headers=AUTH,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 65
        assert body["source"] == "heuristic"
        assert "suggestedAnswer" in body

    def test_evaluate_answer_requires_question(self, client):
        response = client.post(
            "/api/v1/interview-roles/evaluate-answer",
            json={"answer": "x", "role": "Backend Developer", "category": "Technical"},
            headers=AUTH,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_generate_questions_by_ids_uses_fallback_bank(self, client):
        roles = client.get("/api/v1/interview-roles").json()
        frontend = next(role for role in roles if role["name"] == "Frontend Developer")
        technical = next(c for c in frontend["categories"] if c["name"] == "Technical")

        response = client.post(
            "/api/v1/interview-roles/generate-questions",
            json={"roleId": frontend["id"], "categoryId": technical["id"], "count": 5},
            headers=AUTH,
        )

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert "timeLimit" in response.json()[0]

    def test_generate_questions_by_name_with_ai(self):
        backend = AsyncMock()
        backend.complete.return_value = json.dumps([{"question": "How do you tune a model?"}])
        app = create_app(
            store=InMemoryDocumentStore(),
            evaluation_service=AnswerEvaluationService(gateway=AIGateway(backend=backend)),
        )

        with TestClient(app) as client:
            response = client.post(
                "/api/v1/interview-roles/generate-questions",
                json={"role": "Data Scientist", "category": "Technical", "count": 1},
                headers=AUTH,
            )

        assert response.status_code == 200
        assert response.json()[0]["question"] == "How do you tune a model?"
        assert "Focus: Generate technical interview questions for data scientists" in backend.complete.call_args.args[0]

    def test_generate_questions_unknown_category(self, client):
        roles = client.get("/api/v1/interview-roles").json()
        response = client.post(
            "/api/v1/interview-roles/generate-questions",
            json={"roleId": roles[0]["id"], "categoryId": "missing"},
            headers=AUTH,
        )
        assert response.status_code == 404

    def test_generate_questions_needs_role(self, client):
        response = client.post("/api/v1/interview-roles/generate-questions", json={}, headers=AUTH)
        assert response.status_code == 400


class TestRoleEndpoints:
    """Test cases for role management."""

    def test_create_update_delete_role(self, client):
        created = client.post(
            "/api/v1/interview-roles",
            json={"name": "QA Engineer", "description": "Testing",
                  "categories": [{"name": "Technical", "aiPrompt": "Ask about test pyramids"}]},
            headers=AUTH,
        )
        assert created.status_code == 201
        role_id = created.json()["id"]
        assert created.json()["createdBy"] == "user-1"

        updated = client.put(f"/api/v1/interview-roles/{role_id}", json={"description": "Quality"}, headers=AUTH)
        assert updated.status_code == 200
        assert updated.json()["description"] == "Quality"

        deleted = client.delete(f"/api/v1/interview-roles/{role_id}", headers=AUTH)
        assert deleted.status_code == 200
        names = {role["name"] for role in client.get("/api/v1/interview-roles").json()}
        assert "QA Engineer" not in names

    def test_duplicate_role_is_400(self, client):
        response = client.post(
            "/api/v1/interview-roles",
            json={"name": "Frontend Developer", "description": "Again"},
            headers=AUTH,
        )
        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "name"


class TestInterviewEndpoints:
    """Test cases for the session lifecycle over HTTP."""

    def create(self, client, **overrides):
        payload = {"role": "Backend Developer", "category": "Technical", "duration": 45,
                   "questions": [question(85), question(75), question(90, "Behavioral")], "tags": ["api"]}
        payload.update(overrides)
        return client.post("/api/v1/interviews", json=payload, headers=AUTH)

    def test_create_and_fetch(self, client):
        response = self.create(client)

        assert response.status_code == 201
        interview = response.json()["interview"]
        assert interview["totalScore"] == 83
        assert interview["status"] == "in-progress"

        fetched = client.get(f"/api/v1/interviews/{interview['id']}", headers=AUTH)
        assert fetched.json()["interview"]["id"] == interview["id"]

    def test_out_of_range_score_is_400(self, client):
        response = self.create(client, questions=[question(150)])
        assert response.status_code == 400

    def test_invalid_duration_is_400(self, client):
        response = self.create(client, duration=500)
        assert response.status_code == 400

    def test_other_users_session_is_403(self, client):
        interview_id = self.create(client).json()["interview"]["id"]
        response = client.get(f"/api/v1/interviews/{interview_id}", headers=OTHER_AUTH)
        assert response.status_code == 403

    def test_missing_session_is_404(self, client):
        response = client.get("/api/v1/interviews/missing", headers=AUTH)
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_answer_then_complete(self, client):
        interview_id = self.create(client, questions=[]).json()["interview"]["id"]

        answered = client.post(
            f"/api/v1/interviews/{interview_id}/answers",
            json={"question": "Design an API", "answer": "A REST api backed by a database"},
            headers=AUTH,
        )
        assert answered.status_code == 200
        assert answered.json()["evaluation"]["score"] == 70
        assert answered.json()["session"]["totalScore"] == 70

        completed = client.put(f"/api/v1/interviews/{interview_id}", json={"status": "completed"}, headers=AUTH)
        assert completed.status_code == 200
        insights = completed.json()["interview"]["insights"]
        assert insights["overallFeedback"] == "Good performance with room for improvement."

    def test_list_and_delete(self, client):
        self.create(client)
        self.create(client, role="Data Scientist", tags=["ml"])

        listing = client.get("/api/v1/interviews", params={"search": "data"}, headers=AUTH)
        assert listing.status_code == 200
        assert listing.json()["pagination"]["total"] == 1
        interview_id = listing.json()["items"][0]["id"]

        assert client.delete(f"/api/v1/interviews/{interview_id}", headers=AUTH).status_code == 200
        assert client.get("/api/v1/interviews", headers=AUTH).json()["pagination"]["total"] == 1

    def test_bad_sort_field_is_400(self, client):
        response = client.get("/api/v1/interviews", params={"sortBy": "secret"}, headers=AUTH)
        assert response.status_code == 400


class TestActivityAndAnalytics:
    """Test cases for activity listing and analytics."""

    def test_activity_listing(self, client):
        interview = client.post(
            "/api/v1/interviews",
            json={"role": "Backend Developer", "category": "Technical", "duration": 30},
            headers=AUTH,
        ).json()["interview"]
        client.put(f"/api/v1/interviews/{interview['id']}", json={"status": "completed"}, headers=AUTH)

        response = client.get("/api/v1/activity", headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert {a["action"] for a in body["activities"]} == {"created", "completed"}
        assert body["statistics"]["totalActivities"] == 2
        assert body["statistics"]["recentActivityCount"] == 2

        filtered = client.get("/api/v1/activity", params={"action": "completed"}, headers=AUTH)
        assert filtered.json()["pagination"]["total"] == 1

    def test_invalid_activity_action_is_400(self, client):
        response = client.get("/api/v1/activity", params={"action": "exploded"}, headers=AUTH)
        assert response.status_code == 400

    def test_analytics(self, client):
        for score, category in ((85, "Technical"), (55, "System Design")):
            interview = client.post(
                "/api/v1/interviews",
                json={"role": "Backend Developer", "category": category, "duration": 30,
                      "questions": [question(score)]},
                headers=AUTH,
            ).json()["interview"]
            client.put(f"/api/v1/interviews/{interview['id']}", json={"status": "completed"}, headers=AUTH)
        client.post(
            "/api/v1/interviews",
            json={"role": "Backend Developer", "category": "DSA", "duration": 30},
            headers=AUTH,
        )

        response = client.get("/api/v1/analytics", headers=AUTH)

        assert response.status_code == 200
        report = response.json()
        assert report["overview"]["completionRate"] == 67
        assert report["overview"]["avgScore"] == 70
        assert report["weakCategories"] == [
            {"category": "System Design", "avgScore": 55, "improvement": "Focus more on this area"}
        ]
        assert report["progressOverTime"] == [{"month": "2026-03", "avgScore": 70, "interviewsCount": 2}]
        assert len(report["recentSessions"]) == 3
        assert report["insights"][0] == "Good performance with room for improvement. Keep practicing!"

    def test_analytics_empty(self, client):
        report = client.get("/api/v1/analytics", headers=OTHER_AUTH).json()
        assert report["overview"]["avgScore"] is None
        assert report["insights"] == ["Start your first interview practice to begin tracking your progress!"]
