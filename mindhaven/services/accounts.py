"""Account service: password hashing, user creation, and role membership."""

from __future__ import annotations

import logging
import re

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)

# Password hashing context (login passwords and journal passwords)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DEFAULT_ROLE = "user"
PRIVILEGED_ROLES = ("admin", "moderator")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_role_names(db: Session, user_id: int) -> list[str]:
    """Return the names of every role mapped to the user, sorted."""
    rows = (
        db.query(models.UserRole.role_name)
        .join(models.UserRoleMapping, models.UserRoleMapping.role_id == models.UserRole.role_id)
        .filter(models.UserRoleMapping.user_id == user_id)
        .order_by(models.UserRole.role_name)
        .all()
    )
    return [name for (name,) in rows]


def user_has_role(db: Session, user_id: int, *roles: str) -> bool:
    """
    Capability check used by every authorization decision.

    True when the user is mapped to at least one of ``roles``.
    """
    return (
        db.query(models.UserRoleMapping.mapping_id)
        .join(models.UserRole, models.UserRole.role_id == models.UserRoleMapping.role_id)
        .filter(
            models.UserRoleMapping.user_id == user_id,
            models.UserRole.role_name.in_(roles),
        )
        .first()
        is not None
    )


def primary_role(role_names: list[str]) -> str:
    """Most privileged role name, as carried in the token for client-side gating."""
    for role in ("admin", "moderator"):
        if role in role_names:
            return role
    return DEFAULT_ROLE


def get_role(db: Session, role_name: str) -> models.UserRole | None:
    return db.query(models.UserRole).filter(models.UserRole.role_name == role_name).first()


def assign_role(db: Session, user: models.User, role: models.UserRole) -> bool:
    """Map ``role`` to ``user``. Returns False if it was already mapped. Does not commit."""
    existing = (
        db.query(models.UserRoleMapping)
        .filter(
            models.UserRoleMapping.user_id == user.user_id,
            models.UserRoleMapping.role_id == role.role_id,
        )
        .first()
    )
    if existing:
        return False
    db.add(models.UserRoleMapping(user_id=user.user_id, role_id=role.role_id))
    return True


def remove_role(db: Session, user: models.User, role: models.UserRole) -> bool:
    """Unmap ``role`` from ``user``. Returns False if it was not mapped. Does not commit."""
    deleted = (
        db.query(models.UserRoleMapping)
        .filter(
            models.UserRoleMapping.user_id == user.user_id,
            models.UserRoleMapping.role_id == role.role_id,
        )
        .delete(synchronize_session=False)
    )
    return deleted > 0


def create_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    water_goal_ml: int,
) -> models.User:
    """
    Create a user with the default role in one transaction.

    Raises:
        IntegrityError: If the username or email was taken concurrently
    """
    user = models.User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        water_goal_ml=water_goal_ml,
    )
    try:
        db.add(user)
        db.flush()
        role = get_role(db, DEFAULT_ROLE)
        if role is not None:
            assign_role(db, user, role)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("Created user %s (id=%s)", user.username, user.user_id)
    return user


def has_forum_footprint(db: Session, user_id: int) -> bool:
    """True when forum rows reference the user (authored, edited, deleted, or resolved)."""
    references = (
        models.Thread.user_id,
        models.Thread.deleted_by,
        models.Comment.user_id,
        models.Comment.deleted_by,
        models.ThreadEdit.editor_id,
        models.CommentEdit.editor_id,
        models.ContentReport.resolved_by,
    )
    for column in references:
        if db.query(column).filter(column == user_id).first() is not None:
            return True
    return False


def delete_user(db: Session, user: models.User) -> None:
    """Delete a user and all of their private data in one transaction."""
    user_id = user.user_id
    try:
        for model in (
            models.JournalEntry,
            models.MoodLog,
            models.WaterLog,
            models.Reminder,
            models.SedonaLog,
            models.ThreadLike,
            models.CommentLike,
        ):
            db.query(model).filter(model.user_id == user_id).delete(synchronize_session=False)
        db.query(models.ContentReport).filter(
            models.ContentReport.reporter_id == user_id
        ).delete(synchronize_session=False)
        db.delete(user)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted user id=%s", user_id)
