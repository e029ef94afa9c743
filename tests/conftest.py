from __future__ import annotations

import itertools
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from mindhaven import models
from mindhaven.db import Database
from mindhaven.main import create_app
from mindhaven.services import accounts
from mindhaven.settings import Settings

TEST_SECRET = "test-secret-key-with-at-least-32-characters"
TEST_PASSWORD = "password123"

# Minimum bcrypt cost keeps the suite fast
accounts.pwd_context.update(bcrypt__rounds=4)


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'mindhaven.db'}",
        jwt_secret_key=TEST_SECRET,
        run_migrations=False,
        cors_origins=["http://testserver"],
    )


@pytest.fixture()
def database(settings: Settings) -> Generator[Database, None, None]:
    database = Database(settings)
    database.create_all()
    yield database
    database.dispose()


@pytest.fixture()
def client(settings: Settings, database: Database) -> Generator[TestClient, None, None]:
    app = create_app(settings, database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def db(database: Database) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    session = database.session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture()
def make_user(client: TestClient) -> Callable[..., tuple[int, dict[str, str]]]:
    """Register a fresh user through the API; returns ``(user_id, headers)``."""
    counter = itertools.count(1)

    def _make(prefix: str = "user", password: str = TEST_PASSWORD) -> tuple[int, dict[str, str]]:
        n = next(counter)
        response = client.post(
            "/api/auth/register",
            json={
                "username": f"{prefix}{n}",
                "email": f"{prefix}{n}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["user_id"], auth_headers(body["token"])

    return _make


@pytest.fixture()
def grant_role(db: Session) -> Callable[[int, str], None]:
    def _grant(user_id: int, role_name: str) -> None:
        user = db.query(models.User).filter(models.User.user_id == user_id).one()
        accounts.assign_role(db, user, accounts.get_role(db, role_name))
        db.commit()

    return _grant


@pytest.fixture()
def make_admin(make_user, grant_role) -> Callable[[], tuple[int, dict[str, str]]]:
    def _make() -> tuple[int, dict[str, str]]:
        user_id, headers = make_user("admin")
        grant_role(user_id, "admin")
        return user_id, headers

    return _make


@pytest.fixture()
def make_moderator(make_user, grant_role) -> Callable[[], tuple[int, dict[str, str]]]:
    def _make() -> tuple[int, dict[str, str]]:
        user_id, headers = make_user("mod")
        grant_role(user_id, "moderator")
        return user_id, headers

    return _make
