"""Content mutations that keep forum history: edits and soft deletes."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from .. import models


def _now() -> datetime:
    return datetime.now(timezone.utc)


def edit_thread(
    db: Session,
    thread: models.Thread,
    editor_id: int,
    title: str | None,
    content: str | None,
    reason: str | None,
) -> models.Thread:
    """
    Apply an edit to a thread, recording the previous values first.

    Omitted fields keep their current value. The history row and the update
    commit together; if either fails nothing is written.
    """
    try:
        db.add(
            models.ThreadEdit(
                thread_id=thread.thread_id,
                editor_id=editor_id,
                previous_title=thread.title,
                previous_content=thread.content,
                edit_reason=reason,
            )
        )
        if title is not None:
            thread.title = title
        if content is not None:
            thread.content = content
        thread.updated_at = _now()
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(thread)
    return thread


def edit_comment(
    db: Session,
    comment: models.Comment,
    editor_id: int,
    content: str,
    reason: str | None,
) -> models.Comment:
    """Apply an edit to a comment, recording the previous content first."""
    try:
        db.add(
            models.CommentEdit(
                comment_id=comment.comment_id,
                editor_id=editor_id,
                previous_content=comment.content,
                edit_reason=reason,
            )
        )
        comment.content = content
        comment.updated_at = _now()
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(comment)
    return comment


def soft_delete(db: Session, row: models.Thread | models.Comment, actor_id: int) -> None:
    """
    Mark a thread or comment deleted. Does not cascade to children.

    Does not commit, so callers can add an audit entry in the same transaction.
    """
    row.deleted_at = _now()
    row.deleted_by = actor_id
