"""Test registration, login and token handling."""

from dataclasses import replace

import jwt
from sqlalchemy.orm import Session

from mindhaven import models
from mindhaven.auth import create_access_token
from mindhaven.services.accounts import get_role_names

from .conftest import TEST_PASSWORD, TEST_SECRET, auth_headers


def _register(client, username="alice", email="alice@example.com", password=TEST_PASSWORD):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


def test_register_returns_token_and_user(client, db: Session):
    """Registration signs the user in and assigns the default role."""
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully!"
    assert body["token"]
    assert body["user"]["username"] == "alice"
    assert body["user"]["isAdmin"] is False
    assert "role" not in body["user"]

    assert get_role_names(db, body["user"]["user_id"]) == ["user"]


def test_register_stores_hash_not_password(client, db: Session):
    """The stored password is a bcrypt hash."""
    user_id = _register(client).json()["user"]["user_id"]
    user = db.query(models.User).filter(models.User.user_id == user_id).one()
    assert user.password_hash != TEST_PASSWORD
    assert user.password_hash.startswith("$2")


def test_register_requires_all_fields(client):
    """Missing username, email or password is a 400."""
    response = client.post("/api/auth/register", json={"username": "bob", "email": "bob@example.com"})
    assert response.status_code == 400
    assert response.json() == {"message": "Username, email, and password are required."}


def test_register_rejects_invalid_email(client):
    """Malformed email addresses are rejected."""
    response = _register(client, email="not-an-email")
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid email format."


def test_register_rejects_short_password(client):
    """Passwords shorter than six characters are rejected."""
    response = _register(client, password="abc")
    assert response.status_code == 400
    assert response.json()["message"] == "Password must be at least 6 characters long."


def test_register_duplicate_email_and_username(client):
    """Email and username are unique; emails compare case-insensitively."""
    assert _register(client).status_code == 201

    response = _register(client, username="other", email="ALICE@example.com")
    assert response.status_code == 409
    assert response.json()["message"] == "Email already in use."

    response = _register(client, username="alice", email="new@example.com")
    assert response.status_code == 409
    assert response.json()["message"] == "Username already taken."


def test_login_success_includes_role_and_ban_status(client):
    """Login returns a token plus role and ban status."""
    _register(client)
    response = client.post(
        "/api/auth/login", json={"email": "Alice@Example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"]["role"] == "user"
    assert body["user"]["is_banned"] is False
    assert body["user"]["isAdmin"] is False


def test_login_wrong_password_and_unknown_email(client):
    """Both failures return the same 401."""
    _register(client)
    wrong = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope123"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": TEST_PASSWORD})
    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid credentials."}


def test_login_missing_fields(client):
    """Login without a password is a 400."""
    response = client.post("/api/auth/login", json={"email": "alice@example.com"})
    assert response.status_code == 400


def test_token_claims(client, settings):
    """The token carries id, username and the role snapshot."""
    token = _register(client).json()["token"]
    payload = jwt.decode(token, TEST_SECRET, algorithms=[settings.jwt_algorithm])
    assert payload["username"] == "alice"
    assert payload["isAdmin"] is False
    assert payload["role"] == "user"
    assert payload["type"] == "access"
    assert payload["sub"] == str(payload["id"])


def test_admin_flag_in_login_token(client, grant_role, settings):
    """Admins get isAdmin in both the response and the token."""
    user_id = _register(client).json()["user"]["user_id"]
    grant_role(user_id, "admin")

    body = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    ).json()
    assert body["user"]["isAdmin"] is True
    assert body["user"]["role"] == "admin"
    payload = jwt.decode(body["token"], TEST_SECRET, algorithms=[settings.jwt_algorithm])
    assert payload["isAdmin"] is True


def test_missing_token_is_401(client):
    """Protected routes without a token return 401."""
    response = client.get("/api/users/me")
    assert response.status_code == 401
    assert response.json()["message"] == "Authentication token required."


def test_invalid_token_is_403(client):
    """A garbage token returns 403."""
    response = client.get("/api/users/me", headers=auth_headers("not-a-jwt"))
    assert response.status_code == 403
    assert response.json()["message"] == "Invalid or expired token."


def test_expired_token_is_403(client, db: Session, settings):
    """Tokens past their expiry are rejected."""
    user_id = _register(client).json()["user"]["user_id"]
    user = db.query(models.User).filter(models.User.user_id == user_id).one()
    expired = create_access_token(user, ["user"], replace(settings, access_token_expire_minutes=-1))
    response = client.get("/api/users/me", headers=auth_headers(expired))
    assert response.status_code == 403


def test_token_signed_with_other_secret_is_403(client, db: Session, settings):
    """Signature is verified against the configured secret."""
    user_id = _register(client).json()["user"]["user_id"]
    user = db.query(models.User).filter(models.User.user_id == user_id).one()
    forged = create_access_token(user, ["admin"], replace(settings, jwt_secret_key="x" * 40))
    response = client.get("/api/users/me", headers=auth_headers(forged))
    assert response.status_code == 403


def test_banned_user_is_rejected(client, make_admin):
    """A ban blocks both existing tokens and new logins."""
    body = _register(client).json()
    headers = auth_headers(body["token"])
    _, admin_headers = make_admin()

    response = client.put(
        f"/api/users/{body['user']['user_id']}/ban-status",
        json={"is_banned": True},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = client.get("/api/users/me", headers=headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Account is banned."

    response = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Account is banned."
