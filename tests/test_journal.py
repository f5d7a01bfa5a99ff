"""Tests for the mood journal."""

import pytest


class TestJournal:

    @pytest.mark.parametrize("mood", ["sad", "neutral", "happy", "very-happy"])
    async def test_create_entry(self, authenticated_client, mood):
        response = await authenticated_client.post(
            "/api/journal",
            json={"entry": "Paid off my card today", "mood": mood},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["entry"] == "Paid off my card today"
        assert data["mood"] == mood

    async def test_entries_newest_first(self, authenticated_client):
        for text, mood in [("one", "sad"), ("two", "neutral"), ("three", "happy")]:
            await authenticated_client.post("/api/journal", json={"entry": text, "mood": mood})

        response = await authenticated_client.get("/api/journal")
        assert response.status_code == 200
        assert [e["entry"] for e in response.json()] == ["three", "two", "one"]

    async def test_invalid_mood_rejected(self, authenticated_client):
        response = await authenticated_client.post(
            "/api/journal",
            json={"entry": "Hmm", "mood": "ecstatic"},
        )
        assert response.status_code == 400

        entries = await authenticated_client.get("/api/journal")
        assert entries.json() == []

    async def test_empty_entry_rejected(self, authenticated_client):
        response = await authenticated_client.post(
            "/api/journal",
            json={"entry": "", "mood": "happy"},
        )
        assert response.status_code == 400
