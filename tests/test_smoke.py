# 📦 /tests/test_smoke.py

import pytest
from fastapi.testclient import TestClient

from engine.matcher import WeightsConfigError
from main import Settings, app, create_app
from tests.utils.dummies import catalog_row, write_catalog

client = TestClient(app)


def make_request(**overrides):
    body = {
        "areaOfConcern": ["Anxiety"],
        "treatmentModality": [],
        "location": "CA",
        "therapistGender": "No preference",
        "therapistEthnicity": "No preference",
        "therapistReligion": "No preference",
        "language": "English",
        "paymentMethod": "Aetna",
        "availability": ["Weekday Mornings"],
    }
    body.update(overrides)
    return body

@pytest.fixture
def make_client(tmp_path):
    def _make(rows=None, path=None):
        if path is None:
            path = write_catalog(tmp_path / "providers.csv", rows or [])
        return TestClient(create_app(Settings(catalog_path=path)))
    return _make

# ---------------------- Health ----------------------

def test_healthcheck():
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["version"] == app.version

# ---------------------- /match ----------------------

def test_match_bundled_catalog():
    response = client.post("/match", json=make_request())
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert 0 < len(body["data"]) <= 3
    top = body["data"][0]
    assert top["name"] == "Maya Chen"
    assert top["location"] == ["California", "Oregon"]
    # 5 specialty + 5 payment + 5 time + 5 gender + 3 language + 1 + 1 + 1 modality + 2 location
    assert top["matchScore"] == 28
    scores = [m["matchScore"] for m in body["data"]]
    assert scores == sorted(scores, reverse=True)

def test_match_response_uses_camel_case(make_client):
    test_client = make_client([catalog_row()])
    top = test_client.post("/match", json=make_request()).json()["data"][0]
    for key in ("sexualOrientation", "availableTimes", "paymentMethods", "matchScore"):
        assert key in top
    assert top["demographics"] == {"gender": "Female", "ethnicity": "Asian", "religion": "Buddhist"}

def test_match_missing_fields_returns_422():
    response = client.post("/match", json=make_request(areaOfConcern=[], paymentMethod=""))
    assert response.status_code == 422
    body = response.json()
    assert body["status"] == "error"
    assert "areaOfConcern" in body["message"]
    assert "paymentMethod" in body["message"]

def test_match_no_eligible_providers_is_empty_success(make_client):
    test_client = make_client([catalog_row({"No Of Clients Able To Take On": "0"})])
    response = test_client.post("/match", json=make_request())
    assert response.status_code == 200
    assert response.json()["data"] == []

def test_match_unreadable_catalog_returns_503(make_client, tmp_path):
    test_client = make_client(path=tmp_path / "missing.csv")
    response = test_client.post("/match", json=make_request())
    assert response.status_code == 503
    assert response.json()["status"] == "error"

# ---------------------- /explain ----------------------

def test_explain_breakdown(make_client):
    test_client = make_client([catalog_row()])
    response = test_client.post("/explain", json=make_request())
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Maya Chen"
    assert sum(data["breakdown"].values()) == data["match_score"]
    assert data["breakdown"]["location_exact"] == 2

def test_explain_404_when_nothing_eligible(make_client):
    test_client = make_client([])
    response = test_client.post("/explain", json=make_request())
    assert response.status_code == 404

# ---------------------- /catalog/reload ----------------------

def test_catalog_reload_picks_up_changes(tmp_path):
    path = write_catalog(tmp_path / "providers.csv", [catalog_row()])
    test_client = TestClient(create_app(Settings(catalog_path=path)))
    assert len(test_client.post("/match", json=make_request()).json()["data"]) == 1

    write_catalog(path, [catalog_row(), catalog_row({"First Name": "Nina"})])
    assert len(test_client.post("/match", json=make_request()).json()["data"]) == 1

    response = test_client.post("/catalog/reload")
    assert response.status_code == 200
    assert response.json()["providers"] == 2
    assert len(test_client.post("/match", json=make_request()).json()["data"]) == 2

def test_unknown_weights_profile_fails_at_startup():
    with pytest.raises(WeightsConfigError):
        create_app(Settings(weights_profile="nope"))
