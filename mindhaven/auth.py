from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from . import models
from .deps import get_db, get_settings
from .services.accounts import PRIVILEGED_ROLES, get_role_names, primary_role, user_has_role
from .settings import Settings

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes our own 401 instead of FastAPI's 403
oauth2_scheme = HTTPBearer(auto_error=False)

TOKEN_REQUIRED = "Authentication token required."
TOKEN_INVALID = "Invalid or expired token."
PRIVILEGES_REQUIRED = "Forbidden: Requires admin/moderator privileges."


def check_user_can_authenticate(user: models.User) -> None:
    """
    Check if a user is allowed to authenticate.
    Raises HTTPException if the user is banned.

    Called on login and on every authenticated request so a ban takes effect
    immediately, not when the user's token expires.
    """
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is banned.",
        )


def create_access_token(user: models.User, role_names: list[str], settings: Settings) -> str:
    """
    Create a JWT access token for a user.

    The role claims are a snapshot for client-side gating only; the server
    re-checks role membership against the database on every gated route.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.user_id),
        "id": user.user_id,
        "username": user.username,
        "isAdmin": "admin" in role_names,
        "role": primary_role(role_names),
        "is_banned": bool(user.is_banned),
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict:
    """
    Decode and verify a JWT access token.

    Raises:
        jwt.InvalidTokenError: If the signature, expiry or token type is wrong
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    return payload


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> models.User:
    """
    Get the current authenticated user from a JWT bearer token.

    Missing token -> 401, invalid/expired token or unknown user -> 403.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=TOKEN_REQUIRED)

    try:
        payload = decode_access_token(credentials.credentials, settings)
        user_id = int(payload["sub"])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired access token")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TOKEN_INVALID)
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TOKEN_INVALID)

    user = db.query(models.User).filter(models.User.user_id == user_id).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=TOKEN_INVALID)

    check_user_can_authenticate(user)
    return user


def is_admin(db: Session, user: models.User) -> bool:
    return user_has_role(db, user.user_id, "admin")


def is_moderator(db: Session, user: models.User) -> bool:
    """Moderator capability; admins hold it too."""
    return user_has_role(db, user.user_id, *PRIVILEGED_ROLES)


def require_moderator(
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> models.User:
    """
    Require that the current user has moderator or admin role.
    """
    if not is_moderator(db, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=PRIVILEGES_REQUIRED)
    return user


def require_admin(
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> models.User:
    """
    Require that the current user has admin role.
    """
    if not is_admin(db, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=PRIVILEGES_REQUIRED)
    return user


def require_ownership(
    db: Session,
    resource_owner_id: int,
    current_user: models.User,
    detail: str = "Permission denied",
) -> None:
    """
    Require that the current user owns the resource or is a moderator/admin.
    """
    if resource_owner_id == current_user.user_id:
        return
    if is_moderator(db, current_user):
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def token_for(db: Session, user: models.User, settings: Settings) -> tuple[str, list[str]]:
    """Issue an access token for ``user`` and return it with the user's role names."""
    role_names = get_role_names(db, user.user_id)
    return create_access_token(user, role_names, settings), role_names
