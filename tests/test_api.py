from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

import config
from API import app
from conftest import completion_response


@pytest.fixture
def api(monkeypatch):
    monkeypatch.setattr(config, "API_KEY", "test-key")
    monkeypatch.setattr(config, "LLM_MAX_RETRIES", 0)
    return TestClient(app)


def _body(documents=True):
    body = {
        "medication": {
            "id": "med-1",
            "name": "Amoxil 500",
            "ingredients": ["Penicillin", "Penicillamine", "Lactose"],
        },
        "profile": {
            "id": "user-1",
            "allergies": ["penicillin"],
            "intolerances": ["lactose"],
            "age": 30,
        },
    }
    if documents:
        body["documents"] = [
            {"id": "d1", "medication_id": "med-1", "type": "PIL", "extracted_text": "Contains penicillin."}
        ]
    return body


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_assess_without_documents_skips_ai(api):
    with patch("llm_client.requests.post") as post:
        response = api.post("/assess", json=_body(documents=False))

    assert response.status_code == 200
    data = response.json()
    assert data["allergy"] == {"status": "danger", "conflicting_ingredients": ["penicillin"]}
    assert data["status_label"] == "Allergic conflict"
    assert data["ai"] is None
    post.assert_not_called()

    flags = {h["ingredient"]: h for h in data["highlights"]}
    assert flags["Penicillin"]["matched_in"] == ["allergies"]
    assert flags["Lactose"]["matched_in"] == ["intolerances"]
    assert flags["Penicillamine"]["flagged"] is False


def test_assess_with_documents_returns_ai(api):
    content = '{"general_summary":"G","personalized_summary":"P","status":"danger","source":"S"}'
    with patch("llm_client.requests.post", return_value=completion_response(content)):
        response = api.post("/assess", json=_body())

    assert response.status_code == 200
    assert response.json()["ai"] == {
        "general_summary": "G",
        "personalized_summary": "P",
        "status": "danger",
        "source": "S",
    }


def test_assess_degrades_when_llm_unreachable(api):
    import requests

    with patch("llm_client.requests.post", side_effect=requests.exceptions.ConnectionError("down")):
        response = api.post("/assess", json=_body())

    assert response.status_code == 200
    ai = response.json()["ai"]
    assert ai["status"] == "caution"
    assert ai["general_summary"] == config.DEGRADED_MESSAGE


def test_assess_rejects_out_of_range_age(api):
    body = _body(documents=False)
    body["profile"]["age"] = 150
    response = api.post("/assess", json=body)
    assert response.status_code == 422
