from __future__ import annotations

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from .settings import Settings


def get_db(request: Request) -> Generator[Session, None, None]:
    yield from request.app.state.db.get_session()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
