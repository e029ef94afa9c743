"""Test profile management, journal passwords and admin user management."""

from sqlalchemy.orm import Session

from mindhaven import models


def _create_thread(client, headers, topic_id=1):
    response = client.post(
        f"/api/community/topics/{topic_id}/threads",
        json={"title": "Hello", "content": "First post"},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["thread"]["thread_id"]


def test_get_me(client, make_user):
    """Profile includes roles and never password hashes."""
    user_id, headers = make_user()
    response = client.get("/api/users/me", headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == user_id
    assert body["roles"] == ["user"]
    assert body["has_journal_password"] is False
    assert body["water_goal_ml"] == 2000
    assert "password_hash" not in body
    assert "journal_password_hash" not in body


def test_update_me_partial(client, make_user):
    """Only the fields sent are changed."""
    _, headers = make_user()
    response = client.put(
        "/api/users/me",
        json={"full_name": "Alice Liddell", "bio": "Hello"},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Alice Liddell"
    assert body["bio"] == "Hello"
    assert body["username"] == "user1"


def test_update_me_ignores_unknown_fields(client, make_user):
    """Fields outside the allow-list are dropped, leaving nothing to update."""
    _, headers = make_user()
    response = client.put("/api/users/me", json={"password_hash": "x", "is_banned": True}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No valid fields provided for update."


def test_update_me_email_format(client, make_user):
    """Profile email changes are held to the registration format."""
    _, headers = make_user()
    response = client.put("/api/users/me", json={"email": "not-an-email"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email format."

    response = client.put("/api/users/me", json={"email": "New@Example.com"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "new@example.com"


def test_update_me_username_conflict(client, make_user):
    """Taking another user's username is a 409."""
    make_user()
    _, headers = make_user()
    response = client.put("/api/users/me", json={"username": "user1"}, headers=headers)
    assert response.status_code == 409


def test_journal_password_lifecycle(client, make_user):
    """Set, verify, change and remove the journal password."""
    _, headers = make_user()

    response = client.put("/api/users/me/journal-password", json={"password": "secret1"}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/users/me", headers=headers).json()["has_journal_password"] is True

    response = client.post("/api/users/me/journal-password/verify", json={"password": "secret1"}, headers=headers)
    assert response.json() == {"valid": True}
    response = client.post("/api/users/me/journal-password/verify", json={"password": "wrong12"}, headers=headers)
    assert response.json() == {"valid": False}

    # Changing requires the current password
    response = client.put("/api/users/me/journal-password", json={"password": "secret2"}, headers=headers)
    assert response.status_code == 400
    response = client.put(
        "/api/users/me/journal-password",
        json={"password": "secret2", "current_password": "secret1"},
        headers=headers,
    )
    assert response.status_code == 200

    response = client.post("/api/users/me/journal-password/remove", json={"password": "secret1"}, headers=headers)
    assert response.status_code == 401
    response = client.post("/api/users/me/journal-password/remove", json={"password": "secret2"}, headers=headers)
    assert response.status_code == 200
    assert client.get("/api/users/me", headers=headers).json()["has_journal_password"] is False


def test_list_users_requires_admin(client, make_user, make_admin):
    """Only admins can list users."""
    _, headers = make_user()
    response = client.get("/api/users/list", headers=headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Forbidden: Requires admin/moderator privileges."

    admin_id, admin_headers = make_admin()
    response = client.get("/api/users/list", headers=admin_headers)
    assert response.status_code == 200
    by_id = {u["user_id"]: u for u in response.json()}
    assert by_id[admin_id]["roles"] == ["admin", "user"]


def test_assign_and_remove_role(client, make_user, make_admin, db: Session):
    """Role changes are applied immediately and audited."""
    user_id, headers = make_user()
    admin_id, admin_headers = make_admin()

    response = client.post(f"/api/users/{user_id}/roles", json={"role": "moderator"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["roles"] == ["moderator", "user"]

    # Granting twice is a no-op
    response = client.post(f"/api/users/{user_id}/roles", json={"role": "moderator"}, headers=admin_headers)
    assert response.json()["roles"] == ["moderator", "user"]

    response = client.request(
        "DELETE", f"/api/users/{user_id}/roles", json={"role": "moderator"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["roles"] == ["user"]

    actions = [
        a
        for (a,) in db.query(models.AuditLog.action)
        .filter(models.AuditLog.actor_id == admin_id)
        .order_by(models.AuditLog.id)
    ]
    assert actions == ["grant_moderator", "revoke_moderator"]


def test_unknown_role_is_404(client, make_user, make_admin):
    user_id, _ = make_user()
    _, admin_headers = make_admin()
    response = client.post(f"/api/users/{user_id}/roles", json={"role": "superuser"}, headers=admin_headers)
    assert response.status_code == 404


def test_admin_cannot_remove_own_admin_role(client, make_admin):
    """Admins cannot demote themselves."""
    admin_id, admin_headers = make_admin()
    response = client.request(
        "DELETE", f"/api/users/{admin_id}/roles", json={"role": "admin"}, headers=admin_headers
    )
    assert response.status_code == 400


def test_view_roles_self_or_admin(client, make_user, make_admin):
    """A user can see their own roles but not someone else's."""
    user_id, headers = make_user()
    other_id, _ = make_user()
    _, admin_headers = make_admin()

    assert client.get(f"/api/users/{user_id}/roles", headers=headers).status_code == 200
    assert client.get(f"/api/users/{other_id}/roles", headers=headers).status_code == 403
    assert client.get(f"/api/users/{other_id}/roles", headers=admin_headers).status_code == 200


def test_delete_user(client, make_user, make_admin, db: Session):
    """Users without forum history are deleted along with their private data."""
    user_id, headers = make_user()
    _, admin_headers = make_admin()
    client.post("/api/moods", json={"mood": "happy"}, headers=headers)

    response = client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert db.query(models.User).filter(models.User.user_id == user_id).first() is None
    assert db.query(models.MoodLog).filter(models.MoodLog.user_id == user_id).count() == 0

    response = client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert response.status_code == 404


def test_delete_user_with_forum_history_is_409(client, make_user, make_admin):
    """Users referenced by forum content must be banned instead."""
    user_id, headers = make_user()
    _, admin_headers = make_admin()
    _create_thread(client, headers)

    response = client.delete(f"/api/users/{user_id}", headers=admin_headers)
    assert response.status_code == 409


def test_admin_cannot_delete_or_ban_self(client, make_admin):
    admin_id, admin_headers = make_admin()
    assert client.delete(f"/api/users/{admin_id}", headers=admin_headers).status_code == 400
    response = client.put(
        f"/api/users/{admin_id}/ban-status", json={"is_banned": True}, headers=admin_headers
    )
    assert response.status_code == 400


def test_unban_restores_access(client, make_user, make_admin):
    """Unbanning lets the existing token work again."""
    user_id, headers = make_user()
    _, admin_headers = make_admin()

    client.put(f"/api/users/{user_id}/ban-status", json={"is_banned": True}, headers=admin_headers)
    assert client.get("/api/users/me", headers=headers).status_code == 403

    response = client.put(
        f"/api/users/{user_id}/ban-status", json={"is_banned": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["user"]["is_banned"] is False
    assert client.get("/api/users/me", headers=headers).status_code == 200
