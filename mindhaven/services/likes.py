"""Like toggling for threads and comments."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)


def _toggle(db: Session, like_model, target_column: str, user_id: int, target_id: int) -> tuple[bool, int]:
    """
    Toggle a like row in one transaction and return ``(liked, like_count)``.

    The count is always recomputed from the like table after the toggle.
    Two concurrent toggles by the same user race on the unique constraint;
    the loser's IntegrityError propagates after rollback.
    """
    target = getattr(like_model, target_column)
    try:
        existing = (
            db.query(like_model)
            .filter(like_model.user_id == user_id, target == target_id)
            .first()
        )
        if existing is not None:
            db.delete(existing)
            liked = False
        else:
            db.add(like_model(user_id=user_id, **{target_column: target_id}))
            liked = True
        db.flush()

        like_count = (
            db.query(func.count(like_model.like_id)).filter(target == target_id).scalar() or 0
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.debug(
        "User %s %s %s %s (count=%s)",
        user_id,
        "liked" if liked else "unliked",
        target_column,
        target_id,
        like_count,
    )
    return liked, like_count


def toggle_thread_like(db: Session, user_id: int, thread_id: int) -> tuple[bool, int]:
    return _toggle(db, models.ThreadLike, "thread_id", user_id, thread_id)


def toggle_comment_like(db: Session, user_id: int, comment_id: int) -> tuple[bool, int]:
    return _toggle(db, models.CommentLike, "comment_id", user_id, comment_id)
