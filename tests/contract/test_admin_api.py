from __future__ import annotations

from tests.fakes import ADMIN_EMAIL, ADMIN_PASSWORD

AUTH = (ADMIN_EMAIL, ADMIN_PASSWORD)


def test_admin_requires_credentials(api) -> None:
    assert api.client.get("/api/admin/settings").status_code == 401
    assert api.client.get("/api/admin/settings", auth=(ADMIN_EMAIL, "wrong")).status_code == 401


def test_settings_are_masked_and_merged(api) -> None:
    resp = api.client.put(
        "/api/admin/settings",
        auth=AUTH,
        json={"gemini_api_key": "sk-real", "is_maintenance": True},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["gemini_api_key"] != "sk-real"
    assert data["gemini_api_key"]
    assert data["veo_api_key"] == ""
    assert data["is_maintenance"] is True
    assert api.settings.get().gemini_api_key == "sk-real"

    again = api.client.put("/api/admin/settings", auth=AUTH, json={"is_maintenance": False})
    assert again.json()["is_maintenance"] is False
    assert api.settings.get().gemini_api_key == "sk-real"


def test_activity_log_lists_newest_first(api) -> None:
    sid = api.client.post("/api/sessions", json={}).json()["id"]
    api.client.post(f"/api/sessions/{sid}/messages", json={"content": "first"})
    api.client.post(f"/api/sessions/{sid}/messages", json={"content": "second"})

    logs = api.client.get("/api/admin/logs", auth=AUTH).json()

    assert [entry["prompt_preview"] for entry in logs] == ["second", "first"]
    assert {entry["feature"] for entry in logs} == {"Chat"}
    assert {entry["status"] for entry in logs} == {200}
