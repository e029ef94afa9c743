"""Test reminder storage."""


def _create(client, headers, type_="water", title="Drink water", time="09:00:00"):
    response = client.post(
        "/api/reminders",
        json={"type": type_, "title": title, "time": time},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_reminders_grouped_by_type(client, make_user):
    """Reminders come back split by type and ordered by time of day."""
    _, headers = make_user()
    late = _create(client, headers, time="18:00:00")
    early = _create(client, headers, time="07:30:00")
    breathe = _create(client, headers, type_="mindfulness", title="Breathe", time="12:00:00")

    body = client.get("/api/reminders", headers=headers).json()
    assert [r["id"] for r in body["water"]] == [early["id"], late["id"]]
    assert [r["id"] for r in body["mindfulness"]] == [breathe["id"]]
    assert body["water"][0]["enabled"] is True
    assert body["water"][0]["frequency"] == "daily"


def test_create_reminder_validation(client, make_user):
    _, headers = make_user()
    response = client.post("/api/reminders", json={"type": "sleep", "title": "Bed", "time": "22:00:00"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid reminder type. Must be 'mindfulness' or 'water'."

    response = client.post("/api/reminders", json={"type": "water", "title": "No time"}, headers=headers)
    assert response.status_code == 400


def test_update_reminder(client, make_user):
    _, headers = make_user()
    reminder = _create(client, headers)
    response = client.patch(f"/api/reminders/water/{reminder['id']}", json={"enabled": False}, headers=headers)
    assert response.status_code == 200
    assert response.json()["enabled"] is False
    assert response.json()["title"] == "Drink water"

    response = client.patch(f"/api/reminders/water/{reminder['id']}", json={}, headers=headers)
    assert response.status_code == 400


def test_reminder_type_and_owner_scoping(client, make_user):
    """The path type must match and the reminder must belong to the caller."""
    _, headers = make_user()
    _, other_headers = make_user()
    reminder = _create(client, headers)

    response = client.patch(f"/api/reminders/mindfulness/{reminder['id']}", json={"enabled": False}, headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Reminder not found"

    assert client.delete(f"/api/reminders/water/{reminder['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/reminders/sleep/{reminder['id']}", headers=headers).status_code == 400


def test_delete_reminder(client, make_user):
    _, headers = make_user()
    reminder = _create(client, headers)
    assert client.delete(f"/api/reminders/water/{reminder['id']}", headers=headers).status_code == 200
    assert client.get("/api/reminders", headers=headers).json() == {"mindfulness": [], "water": []}
