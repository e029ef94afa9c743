"""Audit trail for admin and moderator actions."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)


def log_moderation_action(
    db: Session,
    actor_id: int,
    action: str,
    target_type: str | None = None,
    target_id: int | None = None,
    note: str | None = None,
    commit: bool = True,
) -> models.AuditLog:
    """
    Record a moderation action in audit_logs.

    Args:
        db: Database session
        actor_id: ID of the user performing the action
        action: Action name (e.g., "delete_thread", "resolve_report", "ban_user")
        target_type: Type of target (e.g., "user", "thread", "comment", "report")
        target_id: ID of the target entity
        note: Additional context or notes about the action
        commit: Commit immediately; pass False to join the caller's transaction

    Returns:
        The created AuditLog entry
    """
    audit_entry = models.AuditLog(
        actor_id=actor_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        note=note,
    )
    db.add(audit_entry)
    if commit:
        db.commit()
        db.refresh(audit_entry)
    logger.info(
        "Moderation action %s by user %s on %s %s", action, actor_id, target_type, target_id
    )
    return audit_entry
