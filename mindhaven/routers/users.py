"""User profile, journal password, and admin user management endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, is_admin, require_admin
from ..deps import get_db
from ..services import accounts
from ..utils.audit import log_moderation_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

MIN_JOURNAL_PASSWORD_LENGTH = 6


def _profile(db: Session, user: models.User) -> schemas.UserProfile:
    profile = schemas.UserProfile.model_validate(user)
    profile.roles = accounts.get_role_names(db, user.user_id)
    profile.has_journal_password = user.journal_password_hash is not None
    return profile


def _user_or_404(db: Session, user_id: int) -> models.User:
    user = db.query(models.User).filter(models.User.user_id == user_id).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# ============================================================================
# CURRENT USER
# ============================================================================


@router.get("/me", response_model=schemas.UserProfile)
def get_me(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.UserProfile:
    return _profile(db, current_user)


@router.put("/me", response_model=schemas.UserProfile)
def update_me(
    payload: schemas.UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.UserProfile:
    """
    Update the current user's profile.

    Only allow-listed fields are applied; fields not sent are left unchanged.
    """
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields provided for update.",
        )

    if "username" in updates:
        updates["username"] = (updates["username"] or "").strip()
        if not updates["username"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username cannot be empty.")
        taken = (
            db.query(models.User.user_id)
            .filter(
                models.User.username == updates["username"],
                models.User.user_id != current_user.user_id,
            )
            .first()
        )
        if taken:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken.")

    if "email" in updates:
        updates["email"] = (updates["email"] or "").strip().lower()
        if not updates["email"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email cannot be empty.")
        if not accounts.EMAIL_RE.match(updates["email"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format.")
        taken = (
            db.query(models.User.user_id)
            .filter(
                models.User.email == updates["email"],
                models.User.user_id != current_user.user_id,
            )
            .first()
        )
        if taken:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use.")

    try:
        for field, value in updates.items():
            setattr(current_user, field, value)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(current_user)

    return _profile(db, current_user)


# ============================================================================
# JOURNAL PASSWORD
# ============================================================================


@router.put("/me/journal-password", response_model=schemas.Message)
def set_journal_password(
    payload: schemas.JournalPasswordSet,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Message:
    """
    Set or change the secondary password that guards locked journal entries.

    Changing an existing password requires the current one.
    """
    password = payload.password or ""
    if len(password) < MIN_JOURNAL_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Journal password must be at least {MIN_JOURNAL_PASSWORD_LENGTH} characters long.",
        )

    if current_user.journal_password_hash:
        if not payload.current_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current journal password is required.",
            )
        if not accounts.verify_password(payload.current_password, current_user.journal_password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Current journal password is incorrect.",
            )

    current_user.journal_password_hash = accounts.hash_password(password)
    db.commit()

    return schemas.Message(message="Journal password set successfully.")


@router.post("/me/journal-password/verify", response_model=schemas.JournalPasswordVerifyResponse)
def verify_journal_password(
    payload: schemas.JournalPasswordCheck,
    current_user: models.User = Depends(get_current_user),
) -> schemas.JournalPasswordVerifyResponse:
    if not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password is required.")
    if not current_user.journal_password_hash:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No journal password has been set.",
        )
    valid = accounts.verify_password(payload.password, current_user.journal_password_hash)
    return schemas.JournalPasswordVerifyResponse(valid=valid)


@router.post("/me/journal-password/remove", response_model=schemas.Message)
def remove_journal_password(
    payload: schemas.JournalPasswordCheck,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Message:
    """
    Remove the journal password. Every locked entry of the user is unlocked.
    """
    if not current_user.journal_password_hash:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No journal password has been set.",
        )
    if not payload.password or not accounts.verify_password(
        payload.password, current_user.journal_password_hash
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Journal password is incorrect.",
        )

    try:
        current_user.journal_password_hash = None
        db.query(models.JournalEntry).filter(
            models.JournalEntry.user_id == current_user.user_id,
            models.JournalEntry.is_locked.is_(True),
        ).update({models.JournalEntry.is_locked: False}, synchronize_session=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return schemas.Message(message="Journal password removed successfully.")


# ============================================================================
# ADMIN
# ============================================================================


@router.get("/list", response_model=list[schemas.UserSummary])
def list_users(
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> list[schemas.UserSummary]:
    """List all users with their roles (admin only)."""
    users = db.query(models.User).order_by(models.User.user_id).all()
    role_rows = (
        db.query(models.UserRoleMapping.user_id, models.UserRole.role_name)
        .join(models.UserRole, models.UserRole.role_id == models.UserRoleMapping.role_id)
        .all()
    )
    roles_by_user: dict[int, list[str]] = {}
    for user_id, role_name in role_rows:
        roles_by_user.setdefault(user_id, []).append(role_name)

    summaries = []
    for user in users:
        summary = schemas.UserSummary.model_validate(user)
        summary.roles = sorted(roles_by_user.get(user.user_id, []))
        summaries.append(summary)
    return summaries


@router.delete("/{user_id}", response_model=schemas.Message)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Message:
    """
    Delete a user and their private data (admin only).

    Users referenced by forum content cannot be deleted; ban them instead so
    the forum history stays intact.
    """
    if user_id == admin.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account.",
        )
    user = _user_or_404(db, user_id)
    if accounts.has_forum_footprint(db, user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User has community history; ban the account instead.",
        )

    accounts.delete_user(db, user)
    log_moderation_action(
        db=db,
        actor_id=admin.user_id,
        action="delete_user",
        target_type="user",
        target_id=user_id,
    )
    return schemas.Message(message="User deleted successfully.")


@router.get("/{user_id}/roles", response_model=schemas.UserRolesResponse)
def get_user_roles(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.UserRolesResponse:
    """Roles of a user (the user themselves or an admin)."""
    if user_id != current_user.user_id and not is_admin(db, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
    _user_or_404(db, user_id)
    return schemas.UserRolesResponse(user_id=user_id, roles=accounts.get_role_names(db, user_id))


def _role_or_404(db: Session, role_name: str) -> models.UserRole:
    role = accounts.get_role(db, role_name.strip())
    if role is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found")
    return role


@router.post("/{user_id}/roles", response_model=schemas.UserRolesResponse)
def assign_role(
    user_id: int,
    payload: schemas.RoleChange,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.UserRolesResponse:
    """Grant a role to a user (admin only). Granting a held role is a no-op."""
    user = _user_or_404(db, user_id)
    role = _role_or_404(db, payload.role)

    if accounts.assign_role(db, user, role):
        log_moderation_action(
            db=db,
            actor_id=admin.user_id,
            action=f"grant_{role.role_name}",
            target_type="user",
            target_id=user_id,
            commit=False,
        )
    db.commit()

    return schemas.UserRolesResponse(user_id=user_id, roles=accounts.get_role_names(db, user_id))


@router.delete("/{user_id}/roles", response_model=schemas.UserRolesResponse)
def remove_role(
    user_id: int,
    payload: schemas.RoleChange,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.UserRolesResponse:
    """Revoke a role from a user (admin only). Admins cannot revoke their own admin role."""
    user = _user_or_404(db, user_id)
    role = _role_or_404(db, payload.role)
    if user_id == admin.user_id and role.role_name == "admin":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot remove your own admin role.",
        )

    if accounts.remove_role(db, user, role):
        log_moderation_action(
            db=db,
            actor_id=admin.user_id,
            action=f"revoke_{role.role_name}",
            target_type="user",
            target_id=user_id,
            commit=False,
        )
    db.commit()

    return schemas.UserRolesResponse(user_id=user_id, roles=accounts.get_role_names(db, user_id))


@router.put("/{user_id}/ban-status", response_model=schemas.BanStatusResponse)
def set_ban_status(
    user_id: int,
    payload: schemas.BanStatusUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.BanStatusResponse:
    """
    Ban or unban a user (admin only).

    Takes effect on the user's next request; their existing tokens are rejected.
    """
    if user_id == admin.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot change your own ban status.",
        )
    user = _user_or_404(db, user_id)

    try:
        user.is_banned = payload.is_banned
        log_moderation_action(
            db=db,
            actor_id=admin.user_id,
            action="ban_user" if payload.is_banned else "unban_user",
            target_type="user",
            target_id=user_id,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)

    state = "banned" if user.is_banned else "unbanned"
    return schemas.BanStatusResponse(
        message=f"User {state} successfully.",
        user=schemas.BanStatusUser.model_validate(user),
    )
