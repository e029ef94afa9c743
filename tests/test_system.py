"""Test health checks, error rendering, security headers and startup."""

import logging
from dataclasses import replace

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mindhaven import models
from mindhaven.errors import UNIQUE_VIOLATION, constraint_code, integrity_error_response
from mindhaven.main import create_app
from mindhaven.seed import TOPICS, ensure_seed_data
from mindhaven.settings import Settings


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["uptime_s"] >= 0


def test_database_health(client):
    response = client.get("/api/health/db")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_errors_use_message_shape(client):
    """Framework errors are rendered as {"message": ...} too."""
    response = client.get("/api/no-such-route")
    assert response.status_code == 404
    assert set(response.json()) == {"message"}

    response = client.post("/api/auth/login", content="not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert set(response.json()) == {"message"}


def test_security_headers(client):
    response = client.get("/api/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store"
    assert "default-src 'none'" in response.headers["Content-Security-Policy"]
    assert "Strict-Transport-Security" not in response.headers


def test_settings_reject_short_jwt_secret():
    with pytest.raises(RuntimeError):
        Settings(database_url="sqlite://", jwt_secret_key="too-short")


def test_constraint_code_from_sqlite_message():
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: users.email"))
    assert constraint_code(exc) == UNIQUE_VIOLATION
    assert integrity_error_response(exc)[0] == 409


def test_seed_is_idempotent(client, db: Session):
    """Running the seed again creates nothing new."""
    ensure_seed_data(db)
    ensure_seed_data(db)
    assert db.query(models.Topic).count() == len(TOPICS)
    assert db.query(models.UserRole).count() == 3


def test_log_level_comes_from_settings(settings):
    root = logging.getLogger()
    previous = root.level
    try:
        create_app(replace(settings, log_level="debug"))
        assert root.level == logging.DEBUG
    finally:
        root.setLevel(previous)
