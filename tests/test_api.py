"""Tests for API endpoints."""

import pytest
from fastapi.testclient import TestClient

from screw_puzzle.api import main as api_main
from screw_puzzle.api.main import app


client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_session():
    api_main.reset_session()
    yield
    api_main.reset_session()


def new_stage(**overrides):
    body = {"stage_number": 1, "width": 600, "height": 600, "seed": 7}
    body.update(overrides)
    response = client.post("/api/stage", json=body)
    assert response.status_code == 200
    return response.json()


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "stage_loaded": False}


def test_no_stage_loaded():
    assert client.get("/api/stage").status_code == 409
    assert client.post("/api/screws/1/remove").status_code == 409


def test_create_stage():
    data = new_stage()

    assert data["stage_number"] == 1
    assert len(data["plates"]) == 3
    assert data["wood_color"] == "#D4A574"
    assert data["maybe_unsolvable"] is False
    assert data["remaining_screws"] == data["total_screws"]


def test_seed_is_reproducible():
    assert new_stage(seed=11)["plates"] == new_stage(seed=11)["plates"]


def test_invalid_stage_request():
    response = client.post("/api/stage", json={"stage_number": 0})
    assert response.status_code == 400

    response = client.post("/api/stage", json={"stage_number": 1, "width": 0})
    assert response.status_code == 400


def test_remove_removable_screw():
    new_stage()
    removable = client.get("/api/stage/removable").json()
    assert removable["count"] > 0

    screw_id = removable["screws"][0]["screw_id"]
    response = client.post(f"/api/screws/{screw_id}/remove")
    assert response.status_code == 200
    assert response.json()["outcome"] == "removed"

    again = client.post(f"/api/screws/{screw_id}/remove").json()
    assert again["outcome"] == "already_removed"

    stage = client.get("/api/stage").json()
    assert stage["remaining_screws"] == stage["total_screws"] - 1


def test_unknown_screw():
    new_stage()
    assert client.post("/api/screws/999/remove").status_code == 404
    assert client.get("/api/screws/999/coverage").status_code == 404


def test_coverage_endpoint():
    data = new_stage()
    top = max(data["plates"], key=lambda p: p["z_order"])
    screw_id = top["screws"][0]["id"]

    response = client.get(f"/api/screws/{screw_id}/coverage")
    assert response.status_code == 200
    assert response.json() == {"screw_id": screw_id, "covered": False, "covering_plate_ids": []}


def test_hit():
    data = new_stage()
    top = max(data["plates"], key=lambda p: p["z_order"])
    screw = top["screws"][0]

    response = client.post("/api/hit", json={"x": screw["x"], "y": screw["y"], "hit_radius": 1})
    hit = response.json()["hit"]
    assert hit["plate_id"] == top["id"]
    assert hit["screw"]["id"] == screw["id"]

    miss = client.post("/api/hit", json={"x": -500, "y": -500}).json()
    assert miss["hit"] is None


def test_items():
    new_stage()

    hint = client.post("/api/items/hint")
    assert hint.status_code == 200
    assert hint.json()["items"]["hint"] == 1
    assert len(hint.json()["data"]["screws"]) > 0

    assert client.post("/api/items/drill").status_code == 400
    assert client.post("/api/items/teleport").status_code == 422


def test_shuffle_and_next():
    new_stage()

    shuffled = client.post("/api/stage/shuffle").json()
    assert shuffled["stage_number"] == 1

    advanced = client.post("/api/stage/next").json()
    assert advanced["stage_number"] == 2
    assert client.get("/api/state").json()["stage_number"] == 2


def test_difficulty():
    response = client.get("/api/difficulty/60")
    assert response.status_code == 200
    data = response.json()
    assert data["params"]["plate_count"] == 12
    assert data["wood_color"] == "#6B4423"

    assert client.get("/api/difficulty/0").status_code == 400


def test_stage_coverage():
    data = new_stage()
    mapping = client.get("/api/stage/coverage").json()

    screw_ids = {str(s["id"]) for plate in data["plates"] for s in plate["screws"]}
    assert set(mapping) == screw_ids

    top = max(data["plates"], key=lambda p: p["z_order"])
    for screw in top["screws"]:
        assert mapping[str(screw["id"])] == []


def test_click_removes_top_screw():
    data = new_stage()
    top = max(data["plates"], key=lambda p: p["z_order"])
    screw = top["screws"][0]

    response = client.post("/api/click", json={"x": screw["x"], "y": screw["y"], "hit_radius": 1})
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["outcome"] == "removed"
    assert result["screw"]["id"] == screw["id"]
    assert "has_moves" in result

    miss = client.post("/api/click", json={"x": -500, "y": -500}).json()
    assert miss == {"result": None, "active_item": None}


def test_activate_drill_then_click():
    data = new_stage()
    top = max(data["plates"], key=lambda p: p["z_order"])
    screw = top["screws"][0]

    activated = client.post("/api/items/drill/activate").json()
    assert activated["result"] is None
    assert activated["active_item"] == "drill"
    assert client.get("/api/state").json()["active_item"] == "drill"

    response = client.post("/api/click", json={"x": screw["x"], "y": screw["y"], "hit_radius": 1})
    body = response.json()
    assert body["result"]["item"] == "drill"
    assert body["result"]["data"]["screw"]["id"] == screw["id"]
    assert body["active_item"] is None

    state = client.get("/api/state").json()
    assert state["items"]["drill"] == 1
    assert state["screws_removed"] == 1


def test_activate_item_toggles_and_runs_out():
    new_stage()

    client.post("/api/items/expose/activate")
    cancelled = client.post("/api/items/expose/activate").json()
    assert cancelled["active_item"] is None
    assert cancelled["items"]["expose"] == 2

    hint = client.post("/api/items/hint/activate").json()
    assert hint["result"]["item"] == "hint"
    assert hint["items"]["hint"] == 1

    client.post("/api/items/hint/activate")
    assert client.post("/api/items/hint/activate").status_code == 400
