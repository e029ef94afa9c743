"""Test journal entries, locking and unlocking."""


def _entry(client, headers, **fields):
    payload = {"title": "Today", "content": "Felt calm", **fields}
    response = client.post("/api/journal/entries", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _set_password(client, headers, password="journal1"):
    response = client.put("/api/users/me/journal-password", json={"password": password}, headers=headers)
    assert response.status_code == 200


def test_create_and_list_entries(client, make_user):
    """Entries default to neutral and unlocked, newest first."""
    _, headers = make_user()
    first = _entry(client, headers)
    second = _entry(client, headers, title="Later", mood="happy")
    assert first["mood"] == "neutral"
    assert first["is_locked"] is False

    entries = client.get("/api/journal/entries", headers=headers).json()
    assert [e["id"] for e in entries] == [second["id"], first["id"]]
    assert entries[0]["mood"] == "happy"


def test_create_entry_validation(client, make_user):
    _, headers = make_user()
    response = client.post("/api/journal/entries", json={"title": "No content"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Title and content are required."

    response = client.post(
        "/api/journal/entries", json={"title": "t", "content": "c", "mood": "ecstatic"}, headers=headers
    )
    assert response.status_code == 400


def test_entries_are_private(client, make_user):
    """Another user's entry looks like it does not exist."""
    _, headers = make_user()
    _, other_headers = make_user()
    entry = _entry(client, headers)

    assert client.get(f"/api/journal/entries/{entry['id']}", headers=other_headers).status_code == 404
    assert client.delete(f"/api/journal/entries/{entry['id']}", headers=other_headers).status_code == 404
    assert client.get("/api/journal/entries", headers=other_headers).json() == []


def test_locking_requires_journal_password(client, make_user):
    _, headers = make_user()
    response = client.post(
        "/api/journal/entries", json={"title": "t", "content": "c", "is_locked": True}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Set a journal password before locking entries."


def test_locked_entry_hides_content_until_unlocked(client, make_user):
    """Locked content is withheld in reads and revealed by the unlock call."""
    _, headers = make_user()
    _set_password(client, headers)
    entry = _entry(client, headers, content="secret thoughts", is_locked=True)

    listed = client.get("/api/journal/entries", headers=headers).json()[0]
    assert listed["content"] is None
    assert listed["is_locked"] is True
    assert client.get(f"/api/journal/entries/{entry['id']}", headers=headers).json()["content"] is None

    response = client.post(f"/api/journal/entries/{entry['id']}/unlock", json={"password": "wrong1"}, headers=headers)
    assert response.status_code == 401

    response = client.post(f"/api/journal/entries/{entry['id']}/unlock", json={"password": "journal1"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["content"] == "secret thoughts"

    # Unlocking reveals once; the entry stays locked
    assert client.get(f"/api/journal/entries/{entry['id']}", headers=headers).json()["content"] is None


def test_unlock_unlocked_entry_is_400(client, make_user):
    _, headers = make_user()
    _set_password(client, headers)
    entry = _entry(client, headers)
    response = client.post(f"/api/journal/entries/{entry['id']}/unlock", json={"password": "journal1"}, headers=headers)
    assert response.status_code == 400


def test_update_entry_partial(client, make_user):
    """Only sent fields change."""
    _, headers = make_user()
    entry = _entry(client, headers, mood="sad")
    response = client.put(f"/api/journal/entries/{entry['id']}", json={"title": "Renamed"}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Renamed"
    assert body["content"] == "Felt calm"
    assert body["mood"] == "sad"


def test_update_locked_entry_keeps_content_hidden(client, make_user):
    """Updating a locked entry echoes content only when the request sent it."""
    _, headers = make_user()
    _set_password(client, headers)
    entry = _entry(client, headers, content="private words", is_locked=True)

    response = client.put(f"/api/journal/entries/{entry['id']}", json={}, headers=headers)
    assert response.status_code == 200
    assert response.json()["content"] is None

    response = client.put(f"/api/journal/entries/{entry['id']}", json={"title": "Renamed"}, headers=headers)
    assert response.json()["title"] == "Renamed"
    assert response.json()["content"] is None

    response = client.put(f"/api/journal/entries/{entry['id']}", json={"content": "new words"}, headers=headers)
    assert response.json()["content"] == "new words"
    assert client.get(f"/api/journal/entries/{entry['id']}", headers=headers).json()["content"] is None


def test_removing_password_unlocks_entries(client, make_user):
    _, headers = make_user()
    _set_password(client, headers)
    entry = _entry(client, headers, is_locked=True)

    response = client.post("/api/users/me/journal-password/remove", json={"password": "journal1"}, headers=headers)
    assert response.status_code == 200

    body = client.get(f"/api/journal/entries/{entry['id']}", headers=headers).json()
    assert body["is_locked"] is False
    assert body["content"] == "Felt calm"


def test_delete_entry(client, make_user):
    _, headers = make_user()
    entry = _entry(client, headers)
    assert client.delete(f"/api/journal/entries/{entry['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/journal/entries/{entry['id']}", headers=headers).status_code == 404


def test_categories(client, make_user):
    """Seeded categories can be attached to entries."""
    _, headers = make_user()
    categories = client.get("/api/journal/categories", headers=headers).json()
    gratitude = next(c for c in categories if c["name"] == "Gratitude")

    entry = _entry(client, headers, category_id=gratitude["category_id"])
    assert entry["category_name"] == "Gratitude"

    response = client.post(
        "/api/journal/entries", json={"title": "t", "content": "c", "category_id": 999}, headers=headers
    )
    assert response.status_code == 400
