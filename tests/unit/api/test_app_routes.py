"""
Tests for the QC Buddy HTTP API.

Test Strategy
-------------
- Apps are built with create_app() and injected collaborators
- FastAPI TestClient; generator is None (offline) or a Mock
- The AI budget only decides whether a request may use the generator
"""

import json
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from qcbuddy.api import create_app
from qcbuddy.api.middleware import CallBudget
from qcbuddy.core.exceptions import ServiceUnavailableError
from qcbuddy.query.assembler import REFUSAL_TEXT

HERO_QUESTION = "What size should hero images be?"


@pytest.fixture
def offline_client(config, store):
    return TestClient(create_app(config, store=store, generator=None, budget=CallBudget(7)))


@pytest.fixture
def online_app(config, store, mock_generator):
    return create_app(config, store=store, generator=mock_generator, budget=CallBudget(1))


@pytest.mark.unit
class TestHealth:
    def test_health(self, offline_client):
        data = offline_client.get("/health").json()

        assert data["ok"] is True
        assert data["service"] == "qc-buddy-backend"
        assert data["gemini"] is False
        assert data["mode"] == "off"
        assert data["maxPerMin"] == 7
        assert data["remaining"] == 7

    def test_health_with_generator(self, online_app):
        assert TestClient(online_app).get("/health").json()["gemini"] is True

    def test_debug_knowledge(self, offline_client):
        data = offline_client.get("/debug/knowledge").json()

        assert data["count"] == 4
        assert len(data["sample"]) == 4
        first = data["sample"][0]
        assert set(first) == {"title", "topic", "market", "textPreview"}
        assert len(first["textPreview"]) <= 160

    def test_reload(self, offline_client, knowledge_dir):
        assert offline_client.get("/debug/knowledge").json()["count"] == 4
        record = {"title": "Zones", "text": "Delivery zones must follow the radius plan for each branch."}
        (knowledge_dir / "zones_sop.json").write_text(json.dumps([record]), encoding="utf-8")

        response = offline_client.post("/knowledge/reload")

        assert response.json() == {"ok": True, "count": 5, "skipped": 0}
        assert offline_client.get("/debug/knowledge").json()["count"] == 5


@pytest.mark.unit
class TestAsk:
    @pytest.mark.parametrize("path", ["/ask", "/chat", "/api/ask", "/api/chat"])
    def test_aliases(self, offline_client, path):
        response = offline_client.post(path, json={"message": HERO_QUESTION})

        assert response.status_code == 200
        data = response.json()
        assert "1125x780" in data["answer"]
        assert data["buddyMood"] == "happy"
        assert 1 <= len(data["sources"]) <= 3

    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   \n  "}])
    def test_missing_message(self, offline_client, body):
        response = offline_client.post("/ask", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "missing_message"}

    def test_batch(self, offline_client):
        data = offline_client.post("/ask", json={"message": "hero image size\nitem names"}).json()
        assert data["buddyMood"] == "helpful"
        assert data["answer"].startswith("Here's what I found:")

    def test_empty_knowledge_refuses(self, config, empty_store, mock_generator):
        client = TestClient(create_app(config, store=empty_store, generator=mock_generator))
        data = client.post("/ask", json={"message": HERO_QUESTION}).json()

        assert data == {"answer": REFUSAL_TEXT, "sources": [], "buddyMood": "confused"}
        mock_generator.generate.assert_not_called()

    def test_budget_exhausted_answers_offline(self, online_app, mock_generator):
        client = TestClient(online_app)

        first = client.post("/ask", json={"message": HERO_QUESTION, "market": "AE"}).json()
        second = client.post("/ask", json={"message": HERO_QUESTION, "market": "AE"}).json()

        assert first["answer"] == "• Hero images must be 1125x780 pixels."
        assert "for every brand" in second["answer"]
        assert mock_generator.generate.call_count == 1

    def test_generator_failure_falls_back(self, online_app, mock_generator):
        mock_generator.generate.side_effect = ServiceUnavailableError("down")
        data = TestClient(online_app).post("/ask", json={"message": HERO_QUESTION}).json()
        assert "for every brand" in data["answer"]

    def test_unexpected_error_returns_refusal(self, offline_client):
        offline_client.app.state.qc.service = Mock(ask=Mock(side_effect=RuntimeError("boom")))

        response = offline_client.post("/ask", json={"message": HERO_QUESTION})

        assert response.status_code == 200
        assert response.json()["answer"] == REFUSAL_TEXT
        assert response.json()["buddyMood"] == "confused"


@pytest.mark.unit
class TestSuggestTags:
    def test_no_items(self, offline_client):
        response = offline_client.post("/suggest-tags", json={"items": ["", "  "]})

        assert response.status_code == 400
        assert response.json() == {
            "cuisineTags": [],
            "extraTags": [],
            "reasoning": [],
            "notes": ["No items provided."],
        }

    def test_keyword_suggestion(self, offline_client):
        response = offline_client.post(
            "/suggest-tags",
            json={"items": ["Manakish Zaatar", "Shish Taouk Plate"], "market": "JO"},
        )

        data = response.json()
        assert response.status_code == 200
        assert data["cuisineTags"] == ["Lebanese", "Grills", "Breakfast"]
        assert data["notes"][0].startswith("Jordan")

    def test_generated_suggestion(self, online_app, mock_generator):
        mock_generator.generate.return_value = '{"cuisineTags": ["lebanese"], "notes": ["ok"]}'

        data = TestClient(online_app).post("/suggest-tags", json={"items": ["Manakish"]}).json()

        assert data == {"cuisineTags": ["lebanese"], "extraTags": [], "reasoning": [], "notes": ["ok"]}
        assert "1. Manakish" in mock_generator.generate.call_args[0][0]

    def test_invalid_generation_falls_back(self, online_app, mock_generator):
        mock_generator.generate.return_value = "Sorry, I can't help."

        data = TestClient(online_app).post("/suggest-tags", json={"items": ["Manakish"]}).json()

        assert data["cuisineTags"][0] == "Lebanese"
