"""Tests for api/routes/themes.py and api/routes/artists.py"""

from __future__ import annotations

from core.diary.catalog import DAILY_THEMES


class TestThemeRoutes:
    def test_session_starts_with_suggestion(self, api_client) -> None:
        data = api_client.get("/themes/current").json()
        assert data["mode"] == "suggested"
        assert data["suggestion"] in DAILY_THEMES
        assert data["active_theme"] == ""

    def test_adopt(self, api_client, session) -> None:
        shown = api_client.get("/themes/current").json()["suggestion"]
        data = api_client.post("/themes/adopt").json()
        assert data["mode"] == "adopted"
        assert data["active_theme"] == shown
        assert session.draft.theme == shown

    def test_adopt_explicit(self, api_client) -> None:
        data = api_client.post("/themes/adopt", json={"theme": "The sound of your morning"}).json()
        assert data["active_theme"] == "The sound of your morning"

    def test_refresh_clears_active(self, api_client) -> None:
        api_client.post("/themes/adopt")
        data = api_client.post("/themes/refresh").json()
        assert data["mode"] == "suggested"
        assert data["active_theme"] == ""
        assert data["suggestion"] in DAILY_THEMES

    def test_dismiss(self, api_client) -> None:
        shown = api_client.post("/themes/adopt").json()["active_theme"]
        data = api_client.post("/themes/dismiss").json()
        assert data["active_theme"] == ""
        assert data["suggestion"] == shown

    def test_custom(self, api_client) -> None:
        api_client.post("/themes/adopt")
        data = api_client.put("/themes/custom", json={"text": "my own words"}).json()
        assert data["mode"] == "custom"
        assert data["active_theme"] == "my own words"

    def test_dismiss_custom(self, api_client, session) -> None:
        api_client.put("/themes/custom", json={"text": "my own prompt"})
        data = api_client.post("/themes/dismiss").json()
        assert data["active_theme"] == ""
        assert data["mode"] == "suggested"
        assert session.draft.theme == ""

    def test_custom_too_long(self, api_client) -> None:
        resp = api_client.put("/themes/custom", json={"text": "x" * 201})
        assert resp.status_code == 422

    def test_theme_kept_after_draft_reset(self, api_client) -> None:
        api_client.put("/themes/custom", json={"text": "kept"})
        api_client.post("/draft/reset")
        assert api_client.get("/themes/current").json()["active_theme"] == "kept"


class TestArtistRoutes:
    def test_catalog(self, api_client) -> None:
        data = api_client.get("/artists/").json()
        assert [a["id"] for a in data["artists"]] == ["flora", "sumi"]
        assert all(a["saved"] for a in data["artists"])
        assert data["default_template"]["style"] == "geometric"

    def test_slots(self, api_client) -> None:
        data = api_client.get("/artists/slots").json()
        assert data["saved"] == ["flora", "sumi"]
        assert data["slots"] == ["flora", "sumi", None, None, None]
        assert data["count"] == 2
        assert data["capacity"] == 5
        assert data["is_full"] is False

    def test_toggle_removes(self, api_client) -> None:
        data = api_client.post("/artists/flora/toggle").json()
        assert data["added"] is False
        assert data["saved"] == ["sumi"]

    def test_toggle_adds(self, api_client) -> None:
        data = api_client.post("/artists/moss/toggle").json()
        assert data["added"] is True
        assert data["saved"] == ["flora", "sumi", "moss"]

    def test_full_inventory_rejects(self, api_client, session) -> None:
        for artist_id in ("a3", "a4", "a5"):
            api_client.post(f"/artists/{artist_id}/toggle")
        assert session.inventory.is_full is True

        resp = api_client.post("/artists/a6/toggle")

        assert resp.status_code == 409
        assert resp.json()["detail"]["reason"] == "inventory_full"
        assert session.inventory.saved_ids == ("flora", "sumi", "a3", "a4", "a5")

    def test_full_inventory_still_removes(self, api_client) -> None:
        for artist_id in ("a3", "a4", "a5"):
            api_client.post(f"/artists/{artist_id}/toggle")
        data = api_client.post("/artists/a4/toggle").json()
        assert data["saved"] == ["flora", "sumi", "a3", "a5"]
        assert data["is_full"] is False
