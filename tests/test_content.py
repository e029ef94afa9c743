"""Test quotes, emergency info, Sedona exercises, music, meditations and resources."""

from datetime import date

from mindhaven.routers.content import quote_for_day
from mindhaven.static_content import QUOTES


def test_quote_is_public(client):
    """The daily quote needs no token."""
    response = client.get("/api/quotes")
    assert response.status_code == 200
    body = response.json()
    assert body["text"]
    assert body["author"]


def test_quote_is_stable_for_a_day():
    assert quote_for_day(date(2026, 1, 1)) == QUOTES[1]
    assert quote_for_day(date(2026, 1, 15)) == QUOTES[0]
    assert quote_for_day(date(2026, 1, 1)) == quote_for_day(date(2026, 1, 1))


def test_emergency_info_requires_auth(client, make_user):
    assert client.get("/api/emergency/contacts").status_code == 401

    _, headers = make_user()
    contacts = client.get("/api/emergency/contacts", headers=headers).json()
    assert any(c["number"] == "988" for c in contacts)
    resources = client.get("/api/emergency/resources", headers=headers).json()
    assert {r["title"] for r in resources} >= {"Coping Strategies", "Safety Plan"}


def test_sedona_exercises_and_logs(client, make_user):
    """Completed sessions are stored per user, newest first."""
    _, headers = make_user()
    _, other_headers = make_user()
    exercises = client.get("/api/sedona/sedona-exercises", headers=headers).json()["exercises"]
    assert exercises[0]["title"] == "Basic Releasing"
    assert exercises[0]["steps"]

    response = client.post("/api/sedona/logs", json={"reflectionText": "Let go of worry"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["reflection_text"] == "Let go of worry"
    client.post("/api/sedona/logs", json={}, headers=headers)

    logs = client.get("/api/sedona/logs", headers=headers).json()
    assert len(logs) == 2
    assert logs[0]["reflection_text"] is None
    assert client.get("/api/sedona/logs", headers=other_headers).json() == []


def test_playlists(client, make_user):
    _, headers = make_user()
    playlists = client.get("/api/music/playlist", headers=headers).json()
    assert playlists[0]["tracks"]
    assert client.get("/api/music/playlists", headers=headers).json() == playlists


# ============================================================================
# MEDITATIONS
# ============================================================================


def test_meditation_crud(client, make_user, make_admin):
    """Admins manage meditations; users see player cards."""
    _, headers = make_user()
    _, admin_headers = make_admin()

    payload = {"title": "Body scan", "audio_url": "https://cdn.example.com/scan.mp3", "duration_seconds": 300}
    assert client.post("/api/meditations", json=payload, headers=headers).status_code == 403

    response = client.post("/api/meditations", json=payload, headers=admin_headers)
    assert response.status_code == 201
    meditation_id = response.json()["meditation_id"]

    cards = client.get("/api/meditations", headers=headers).json()["meditations"]
    assert cards == [
        {
            "id": meditation_id,
            "title": "Body scan",
            "description": None,
            "duration": "5 minutes",
            "audioFile": "https://cdn.example.com/scan.mp3",
        }
    ]

    response = client.put(f"/api/meditations/{meditation_id}", json={"theme": "sleep"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["theme"] == "sleep"
    assert response.json()["title"] == "Body scan"

    assert client.delete(f"/api/meditations/{meditation_id}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/meditations/{meditation_id}", headers=admin_headers).status_code == 404


def test_meditation_requires_title_and_audio(client, make_admin):
    _, admin_headers = make_admin()
    response = client.post("/api/meditations", json={"title": "No audio"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Title and Audio URL are required."


# ============================================================================
# RESOURCES
# ============================================================================


def test_resource_crud(client, make_user, make_admin):
    _, headers = make_user()
    _, admin_headers = make_admin()

    payload = {"category": "Hotlines", "title": "Crisis Line", "contact_info": "988"}
    assert client.post("/api/resources", json=payload, headers=headers).status_code == 403

    response = client.post("/api/resources", json=payload, headers=admin_headers)
    assert response.status_code == 201
    resource_id = response.json()["resource_id"]

    resources = client.get("/api/resources", headers=headers).json()
    assert [r["title"] for r in resources] == ["Crisis Line"]

    response = client.put(f"/api/resources/{resource_id}", json={"link": "https://988lifeline.org"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["link"] == "https://988lifeline.org"

    assert client.delete(f"/api/resources/{resource_id}", headers=admin_headers).status_code == 200
    assert client.get("/api/resources", headers=headers).json() == []


def test_resource_validation(client, make_admin):
    """Category must be one of the known categories and title is required."""
    _, admin_headers = make_admin()
    response = client.post("/api/resources", json={"title": "Missing category"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Category and Title are required fields."

    response = client.post("/api/resources", json={"category": "Yoga", "title": "x"}, headers=admin_headers)
    assert response.status_code == 400
