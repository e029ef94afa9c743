"""Read-side helpers for the community forum: live aggregates and comment trees."""

from __future__ import annotations

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Query, Session

from .. import models, schemas

DELETED_PLACEHOLDER = "[deleted]"


def _comments_count():
    return (
        select(func.count(models.Comment.comment_id))
        .where(
            models.Comment.thread_id == models.Thread.thread_id,
            models.Comment.deleted_at.is_(None),
        )
        .correlate(models.Thread)
        .scalar_subquery()
    )


def _thread_like_count():
    return (
        select(func.count(models.ThreadLike.like_id))
        .where(models.ThreadLike.thread_id == models.Thread.thread_id)
        .correlate(models.Thread)
        .scalar_subquery()
    )


def _thread_user_liked(viewer_id: int):
    return (
        exists()
        .where(
            models.ThreadLike.thread_id == models.Thread.thread_id,
            models.ThreadLike.user_id == viewer_id,
        )
        .correlate(models.Thread)
    )


def thread_query(db: Session, viewer_id: int) -> Query:
    """
    Non-deleted threads joined with author name and live counts.

    Every row is ``(Thread, author_name, comments_count, like_count, user_liked)``.
    """
    return (
        db.query(
            models.Thread,
            models.User.username.label("author_name"),
            _comments_count().label("comments_count"),
            _thread_like_count().label("like_count"),
            _thread_user_liked(viewer_id).label("user_liked"),
        )
        .join(models.User, models.User.user_id == models.Thread.user_id)
        .filter(models.Thread.deleted_at.is_(None))
    )


def _category_names(db: Session, thread_ids: list[int]) -> dict[int, list[str]]:
    if not thread_ids:
        return {}
    rows = (
        db.query(models.ThreadCategoryMapping.thread_id, models.ThreadCategory.name)
        .join(
            models.ThreadCategory,
            models.ThreadCategory.category_id == models.ThreadCategoryMapping.category_id,
        )
        .filter(models.ThreadCategoryMapping.thread_id.in_(thread_ids))
        .order_by(models.ThreadCategory.name)
        .all()
    )
    names: dict[int, list[str]] = {}
    for thread_id, name in rows:
        names.setdefault(thread_id, []).append(name)
    return names


def to_threads(db: Session, rows: list) -> list[schemas.Thread]:
    """Convert ``thread_query`` rows to response models."""
    categories = _category_names(db, [row[0].thread_id for row in rows])
    threads = []
    for thread, author_name, comments_count, like_count, user_liked in rows:
        threads.append(
            schemas.Thread(
                thread_id=thread.thread_id,
                user_id=thread.user_id,
                topic_id=thread.topic_id,
                title=thread.title,
                content=thread.content,
                is_pinned=bool(thread.is_pinned),
                created_at=thread.created_at,
                updated_at=thread.updated_at,
                author_name=author_name,
                comments_count=comments_count or 0,
                like_count=like_count or 0,
                user_liked=bool(user_liked),
                category_names=categories.get(thread.thread_id, []),
            )
        )
    return threads


def get_thread_view(db: Session, thread_id: int, viewer_id: int) -> schemas.Thread | None:
    row = thread_query(db, viewer_id).filter(models.Thread.thread_id == thread_id).first()
    if row is None:
        return None
    return to_threads(db, [row])[0]


def get_live_thread(db: Session, thread_id: int) -> models.Thread | None:
    return (
        db.query(models.Thread)
        .filter(models.Thread.thread_id == thread_id, models.Thread.deleted_at.is_(None))
        .first()
    )


def get_live_comment(db: Session, comment_id: int) -> models.Comment | None:
    """A non-deleted comment whose thread is also live."""
    return (
        db.query(models.Comment)
        .join(models.Thread, models.Thread.thread_id == models.Comment.thread_id)
        .filter(
            models.Comment.comment_id == comment_id,
            models.Comment.deleted_at.is_(None),
            models.Thread.deleted_at.is_(None),
        )
        .first()
    )


def _comment_like_counts(db: Session, comment_ids: list[int], viewer_id: int) -> tuple[dict[int, int], set[int]]:
    if not comment_ids:
        return {}, set()
    counts = dict(
        db.query(models.CommentLike.comment_id, func.count(models.CommentLike.like_id))
        .filter(models.CommentLike.comment_id.in_(comment_ids))
        .group_by(models.CommentLike.comment_id)
        .all()
    )
    liked = {
        comment_id
        for (comment_id,) in db.query(models.CommentLike.comment_id).filter(
            models.CommentLike.comment_id.in_(comment_ids),
            models.CommentLike.user_id == viewer_id,
        )
    }
    return counts, liked


def comment_view(
    comment: models.Comment,
    author_name: str | None,
    like_count: int = 0,
    user_liked: bool = False,
) -> schemas.Comment:
    if comment.deleted_at is not None:
        return schemas.Comment(
            comment_id=comment.comment_id,
            thread_id=comment.thread_id,
            parent_comment_id=comment.parent_comment_id,
            content=DELETED_PLACEHOLDER,
            is_deleted=True,
            created_at=comment.created_at,
        )
    return schemas.Comment(
        comment_id=comment.comment_id,
        thread_id=comment.thread_id,
        user_id=comment.user_id,
        parent_comment_id=comment.parent_comment_id,
        content=comment.content,
        author_name=author_name,
        like_count=like_count,
        user_liked=user_liked,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


def list_thread_comments(db: Session, thread_id: int, viewer_id: int) -> list[schemas.Comment]:
    """
    Comments of a thread in chronological order.

    Deleted comments are rendered as placeholders rather than omitted, so
    reply chains keep their shape.
    """
    rows = (
        db.query(models.Comment, models.User.username)
        .join(models.User, models.User.user_id == models.Comment.user_id)
        .filter(models.Comment.thread_id == thread_id)
        .order_by(models.Comment.created_at.asc(), models.Comment.comment_id.asc())
        .all()
    )

    live_ids = [c.comment_id for c, _ in rows if c.deleted_at is None]
    counts, liked = _comment_like_counts(db, live_ids, viewer_id)

    return [
        comment_view(c, name, counts.get(c.comment_id, 0), c.comment_id in liked)
        for c, name in rows
    ]


def search_threads(db: Session, term: str, viewer_id: int) -> list[schemas.Thread]:
    """
    Case-insensitive substring match over thread title/content and live comment content.

    Wildcards in ``term`` are matched literally.
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    comment_match = (
        exists()
        .where(
            models.Comment.thread_id == models.Thread.thread_id,
            models.Comment.deleted_at.is_(None),
            models.Comment.content.ilike(pattern, escape="\\"),
        )
        .correlate(models.Thread)
    )
    rows = (
        thread_query(db, viewer_id)
        .filter(
            models.Thread.title.ilike(pattern, escape="\\")
            | models.Thread.content.ilike(pattern, escape="\\")
            | comment_match
        )
        .order_by(models.Thread.created_at.desc(), models.Thread.thread_id.desc())
        .all()
    )
    return to_threads(db, rows)
