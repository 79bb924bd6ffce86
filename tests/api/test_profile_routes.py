"""Tests for saved profile and strategy-map layout routes."""

import pytest

pytestmark = pytest.mark.integration


def test_load_profile_before_save_is_404(api_client, studio_id):
    response = api_client.get(f"/api/studios/{studio_id}/profile")
    assert response.status_code == 404


def test_save_then_load_profile(api_client, studio_id):
    profile = {"stage": "Scale", "style": "Whiteboard", "focus": "Operations"}

    saved = api_client.put(f"/api/studios/{studio_id}/profile", json=profile)
    loaded = api_client.get(f"/api/studios/{studio_id}/profile")

    assert saved.status_code == 200
    assert loaded.json() == profile
    assert api_client.get(f"/api/studios/{studio_id}").json()["profile"] == profile


def test_load_profile_reapplies_saved_values(api_client, registry, studio_id):
    api_client.put(f"/api/studios/{studio_id}/profile", json={"stage": "MVP", "style": "Corporate", "focus": "Product"})
    api_client.put(f"/api/studios/{studio_id}/configuration", json={"stage": "Ideation"})

    loaded = api_client.get(f"/api/studios/{studio_id}/profile").json()

    assert loaded["stage"] == "MVP"
    assert registry.get(studio_id).profile.stage == "MVP"


def test_save_layout_before_map_is_409(api_client, studio_id):
    response = api_client.put(f"/api/studios/{studio_id}/strategy-map/layout")
    assert response.status_code == 409


def test_layout_round_trip_keeps_manual_edges(api_client, studio_id):
    api_client.post(f"/api/studios/{studio_id}/generate", json={"topic": "AI-powered plant care app"})
    api_client.post(f"/api/studios/{studio_id}/strategy-map")
    api_client.post(f"/api/studios/{studio_id}/strategy-map/edges", json={"from": "retail", "to": "subs"})

    saved = api_client.put(f"/api/studios/{studio_id}/strategy-map/layout").json()
    api_client.delete(f"/api/studios/{studio_id}/history")
    loaded = api_client.get(f"/api/studios/{studio_id}/strategy-map/layout")

    assert loaded.status_code == 200
    assert loaded.json() == saved
    assert len(loaded.json()["edges"]) == 5
    assert api_client.get(f"/api/studios/{studio_id}").json()["strategyMap"] == saved


def test_load_layout_before_save_is_404(api_client, studio_id):
    response = api_client.get(f"/api/studios/{studio_id}/strategy-map/layout")
    assert response.status_code == 404


def test_new_session_loads_previous_save(api_client, studio_id):
    profile = {"stage": "Growth", "style": "Tech Dark", "focus": "Sales"}
    api_client.put(f"/api/studios/{studio_id}/profile", json=profile)

    second = api_client.post("/api/studios").json()
    loaded = api_client.get(f"/api/studios/{second['id']}/profile")

    assert second["id"] != studio_id
    assert second["ownerId"] == "local"
    assert loaded.status_code == 200
    assert loaded.json() == profile


def test_new_session_loads_previous_layout(api_client, studio_id):
    api_client.post(f"/api/studios/{studio_id}/generate", json={"topic": "AI-powered plant care app"})
    api_client.post(f"/api/studios/{studio_id}/strategy-map")
    saved = api_client.put(f"/api/studios/{studio_id}/strategy-map/layout").json()

    second = api_client.post("/api/studios").json()
    loaded = api_client.get(f"/api/studios/{second['id']}/strategy-map/layout")

    assert loaded.status_code == 200
    assert loaded.json() == saved


def test_saves_are_per_owner(api_client):
    first = api_client.post("/api/studios", json={"ownerId": "founder-a"}).json()
    second = api_client.post("/api/studios", json={"ownerId": "founder-b"}).json()
    api_client.put(f"/api/studios/{first['id']}/profile", json={"stage": "Scale"})

    assert api_client.get(f"/api/studios/{second['id']}/profile").status_code == 404
    assert api_client.get(f"/api/studios/{first['id']}/profile").json()["stage"] == "Scale"


def test_invalid_owner_id_rejected(api_client):
    response = api_client.post("/api/studios", json={"ownerId": "../etc"})
    assert response.status_code == 422
