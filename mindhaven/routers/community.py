"""Community forum endpoints: topics, threads, comments, likes, categories, search."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, is_admin, require_ownership
from ..deps import get_db
from ..services import edits, forum, likes
from ..utils.audit import log_moderation_action

router = APIRouter(prefix="/community", tags=["Community"])


def _thread_or_404(db: Session, thread_id: int) -> models.Thread:
    thread = forum.get_live_thread(db, thread_id)
    if thread is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thread not found")
    return thread


def _comment_or_404(db: Session, comment_id: int) -> models.Comment:
    comment = forum.get_live_comment(db, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


def _check_categories(db: Session, category_ids: list[int]) -> list[int]:
    wanted = sorted(set(category_ids))
    if not wanted:
        return []
    found = {
        category_id
        for (category_id,) in db.query(models.ThreadCategory.category_id).filter(
            models.ThreadCategory.category_id.in_(wanted)
        )
    }
    if len(found) != len(wanted):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")
    return wanted


# ============================================================================
# TOPICS
# ============================================================================


@router.get("/topics", response_model=list[schemas.Topic])
def list_topics(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.Topic]:
    topics = db.query(models.Topic).order_by(models.Topic.name).all()
    return [schemas.Topic.model_validate(t) for t in topics]


@router.get("/topics/{topic_id}", response_model=schemas.Topic)
def get_topic(
    topic_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Topic:
    topic = db.query(models.Topic).filter(models.Topic.topic_id == topic_id).first()
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Topic not found")
    return schemas.Topic.model_validate(topic)


@router.get("/topic-thread-counts", response_model=list[schemas.TopicThreadCount])
def topic_thread_counts(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.TopicThreadCount]:
    """Number of non-deleted threads per topic, including empty topics."""
    rows = (
        db.query(
            models.Topic.topic_id,
            models.Topic.name,
            func.count(models.Thread.thread_id),
        )
        .outerjoin(
            models.Thread,
            (models.Thread.topic_id == models.Topic.topic_id)
            & models.Thread.deleted_at.is_(None),
        )
        .group_by(models.Topic.topic_id, models.Topic.name)
        .order_by(models.Topic.name)
        .all()
    )
    return [
        schemas.TopicThreadCount(topic_id=topic_id, name=name, thread_count=count)
        for topic_id, name, count in rows
    ]


# ============================================================================
# THREADS
# ============================================================================


@router.get("/topics/{topic_id}/threads", response_model=list[schemas.Thread])
def list_threads(
    topic_id: int,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.Thread]:
    """
    List threads in a topic, pinned first, then newest first.

    Without ``limit`` the full set of non-deleted threads is returned.
    """
    query = (
        forum.thread_query(db, current_user.user_id)
        .filter(models.Thread.topic_id == topic_id)
        .order_by(
            models.Thread.is_pinned.desc(),
            models.Thread.created_at.desc(),
            models.Thread.thread_id.desc(),
        )
    )
    if limit is not None:
        query = query.offset((page - 1) * limit).limit(limit)
    return forum.to_threads(db, query.all())


@router.post(
    "/topics/{topic_id}/threads",
    response_model=schemas.ThreadMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_thread(
    topic_id: int,
    payload: schemas.ThreadCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.ThreadMutationResponse:
    """
    Create a thread in a topic, optionally tagged with categories.

    The thread and its category mappings are written in one transaction.
    """
    title = (payload.title or "").strip()
    content = (payload.content or "").strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid title")
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid content")

    topic = db.query(models.Topic).filter(models.Topic.topic_id == topic_id).first()
    if topic is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Topic not found")

    category_ids = _check_categories(db, payload.category_ids)

    thread = models.Thread(
        user_id=current_user.user_id,
        topic_id=topic_id,
        title=title,
        content=content,
    )
    try:
        db.add(thread)
        db.flush()
        for category_id in category_ids:
            db.add(models.ThreadCategoryMapping(thread_id=thread.thread_id, category_id=category_id))
        db.commit()
    except Exception:
        db.rollback()
        raise

    view = forum.get_thread_view(db, thread.thread_id, current_user.user_id)
    return schemas.ThreadMutationResponse(message="Thread created successfully", thread=view)


@router.get("/threads/{thread_id}", response_model=schemas.Thread)
def get_thread(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Thread:
    view = forum.get_thread_view(db, thread_id, current_user.user_id)
    if view is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thread not found")
    return view


@router.patch("/threads/{thread_id}", response_model=schemas.ThreadMutationResponse)
def update_thread(
    thread_id: int,
    payload: schemas.ThreadUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.ThreadMutationResponse:
    """
    Edit a thread (owner, moderator or admin).

    Omitted fields keep their current value; the previous title and content
    are written to the edit history together with the update.
    """
    thread = _thread_or_404(db, thread_id)
    require_ownership(db, thread.user_id, current_user)

    title = payload.title.strip() if payload.title is not None else None
    content = payload.content.strip() if payload.content is not None else None
    if title is not None and not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid title")
    if content is not None and not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid content")

    edits.edit_thread(db, thread, current_user.user_id, title, content, payload.reason)

    view = forum.get_thread_view(db, thread_id, current_user.user_id)
    return schemas.ThreadMutationResponse(message="Thread updated successfully", thread=view)


@router.delete("/threads/{thread_id}", response_model=schemas.Message)
def delete_thread(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Message:
    """
    Soft delete a thread (admin only).

    The row is kept for audit; its comments are not touched.
    """
    if not is_admin(db, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can delete threads",
        )
    thread = _thread_or_404(db, thread_id)

    try:
        edits.soft_delete(db, thread, current_user.user_id)
        log_moderation_action(
            db=db,
            actor_id=current_user.user_id,
            action="delete_thread",
            target_type="thread",
            target_id=thread_id,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return schemas.Message(message="Thread deleted successfully")


@router.get("/threads/{thread_id}/edits", response_model=list[schemas.ThreadEdit])
def list_thread_edits(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.ThreadEdit]:
    """Edit history of a thread, oldest first (owner, moderator or admin)."""
    thread = _thread_or_404(db, thread_id)
    require_ownership(db, thread.user_id, current_user)
    history = (
        db.query(models.ThreadEdit)
        .filter(models.ThreadEdit.thread_id == thread_id)
        .order_by(models.ThreadEdit.edited_at.asc(), models.ThreadEdit.edit_id.asc())
        .all()
    )
    return [schemas.ThreadEdit.model_validate(e) for e in history]


# ============================================================================
# COMMENTS
# ============================================================================


@router.get("/threads/{thread_id}/comments", response_model=list[schemas.Comment])
def list_comments(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.Comment]:
    _thread_or_404(db, thread_id)
    return forum.list_thread_comments(db, thread_id, current_user.user_id)


@router.post(
    "/threads/{thread_id}/comments",
    response_model=schemas.CommentMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    thread_id: int,
    payload: schemas.CommentCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.CommentMutationResponse:
    """
    Comment on a thread, optionally replying to another comment.

    A reply's parent must be a live comment of the same thread.
    """
    content = (payload.content or "").strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Comment content is required"
        )

    _thread_or_404(db, thread_id)

    if payload.parent_comment_id is not None:
        parent = forum.get_live_comment(db, payload.parent_comment_id)
        if parent is None or parent.thread_id != thread_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parent comment not found in this thread",
            )

    comment = models.Comment(
        thread_id=thread_id,
        user_id=current_user.user_id,
        parent_comment_id=payload.parent_comment_id,
        content=content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    return schemas.CommentMutationResponse(
        message="Comment created successfully",
        comment=forum.comment_view(comment, current_user.username),
    )


@router.patch("/comments/{comment_id}", response_model=schemas.CommentMutationResponse)
def update_comment(
    comment_id: int,
    payload: schemas.CommentUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.CommentMutationResponse:
    """Edit a comment (owner, moderator or admin), keeping the previous content in history."""
    content = (payload.content or "").strip()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content is required")

    comment = _comment_or_404(db, comment_id)
    require_ownership(db, comment.user_id, current_user)

    edits.edit_comment(db, comment, current_user.user_id, content, payload.reason)

    author = db.query(models.User.username).filter(models.User.user_id == comment.user_id).scalar()
    return schemas.CommentMutationResponse(
        message="Comment updated successfully",
        comment=forum.comment_view(comment, author),
    )


@router.delete("/comments/{comment_id}", response_model=schemas.CommentMutationResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.CommentMutationResponse:
    """
    Soft delete a comment (owner, moderator or admin).

    Replies stay visible; the deleted comment becomes a placeholder in listings.
    """
    comment = _comment_or_404(db, comment_id)
    require_ownership(db, comment.user_id, current_user)

    try:
        edits.soft_delete(db, comment, current_user.user_id)
        if comment.user_id != current_user.user_id:
            log_moderation_action(
                db=db,
                actor_id=current_user.user_id,
                action="delete_comment",
                target_type="comment",
                target_id=comment_id,
                commit=False,
            )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(comment)

    return schemas.CommentMutationResponse(
        message="Comment deleted successfully",
        comment=forum.comment_view(comment, None),
    )


# ============================================================================
# LIKES
# ============================================================================


@router.post("/threads/{thread_id}/like", response_model=schemas.LikeToggleResponse)
def toggle_thread_like(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.LikeToggleResponse:
    """Toggle the current user's like on a thread."""
    _thread_or_404(db, thread_id)
    liked, like_count = likes.toggle_thread_like(db, current_user.user_id, thread_id)
    return schemas.LikeToggleResponse(liked=liked, like_count=like_count)


@router.post("/comments/{comment_id}/like", response_model=schemas.LikeToggleResponse)
def toggle_comment_like(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.LikeToggleResponse:
    """Toggle the current user's like on a comment."""
    _comment_or_404(db, comment_id)
    liked, like_count = likes.toggle_comment_like(db, current_user.user_id, comment_id)
    return schemas.LikeToggleResponse(liked=liked, like_count=like_count)


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[schemas.ThreadCategory])
def list_categories(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.ThreadCategory]:
    categories = db.query(models.ThreadCategory).order_by(models.ThreadCategory.name).all()
    return [schemas.ThreadCategory.model_validate(c) for c in categories]


@router.post("/threads/{thread_id}/categories", response_model=schemas.ThreadMutationResponse)
def add_thread_categories(
    thread_id: int,
    payload: schemas.CategoryAssign,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.ThreadMutationResponse:
    """Tag a thread with categories. Categories already on the thread are ignored."""
    thread = _thread_or_404(db, thread_id)
    require_ownership(db, thread.user_id, current_user)

    category_ids = _check_categories(db, payload.category_ids)
    existing = {
        category_id
        for (category_id,) in db.query(models.ThreadCategoryMapping.category_id).filter(
            models.ThreadCategoryMapping.thread_id == thread_id
        )
    }
    for category_id in category_ids:
        if category_id not in existing:
            db.add(models.ThreadCategoryMapping(thread_id=thread_id, category_id=category_id))
    db.commit()

    view = forum.get_thread_view(db, thread_id, current_user.user_id)
    return schemas.ThreadMutationResponse(message="Categories added successfully", thread=view)


# ============================================================================
# SEARCH & PROFILES
# ============================================================================


@router.get("/search", response_model=list[schemas.Thread])
def search(
    query: str | None = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.Thread]:
    """
    Substring search over thread titles, thread content and comment content.

    Case-insensitive, newest first; deleted threads and comments never match.
    """
    term = (query or "").strip()
    if len(term) < 3:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query must be at least 3 characters long",
        )
    return forum.search_threads(db, term, current_user.user_id)


@router.get("/users/{user_id}/profile", response_model=schemas.ForumProfile)
def user_forum_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.ForumProfile:
    """Public forum profile: recent threads and comments plus activity stats."""
    user = db.query(models.User).filter(models.User.user_id == user_id).first()
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    thread_rows = (
        forum.thread_query(db, current_user.user_id)
        .filter(models.Thread.user_id == user_id)
        .order_by(models.Thread.created_at.desc(), models.Thread.thread_id.desc())
        .limit(20)
        .all()
    )

    live_comments = (
        db.query(models.Comment, models.Thread.title)
        .join(models.Thread, models.Thread.thread_id == models.Comment.thread_id)
        .filter(
            models.Comment.user_id == user_id,
            models.Comment.deleted_at.is_(None),
            models.Thread.deleted_at.is_(None),
        )
    )
    comment_rows = (
        live_comments.order_by(models.Comment.created_at.desc(), models.Comment.comment_id.desc())
        .limit(20)
        .all()
    )

    thread_count = (
        db.query(func.count(models.Thread.thread_id))
        .filter(models.Thread.user_id == user_id, models.Thread.deleted_at.is_(None))
        .scalar()
    )
    comment_count = live_comments.with_entities(func.count(models.Comment.comment_id)).scalar()
    thread_likes = (
        db.query(func.count(models.ThreadLike.like_id))
        .join(models.Thread, models.Thread.thread_id == models.ThreadLike.thread_id)
        .filter(models.Thread.user_id == user_id, models.Thread.deleted_at.is_(None))
        .scalar()
    )
    comment_likes = (
        db.query(func.count(models.CommentLike.like_id))
        .join(models.Comment, models.Comment.comment_id == models.CommentLike.comment_id)
        .filter(models.Comment.user_id == user_id, models.Comment.deleted_at.is_(None))
        .scalar()
    )

    return schemas.ForumProfile(
        user_id=user.user_id,
        username=user.username,
        threads=forum.to_threads(db, thread_rows),
        comments=[
            schemas.ForumProfileComment(
                comment_id=c.comment_id,
                thread_id=c.thread_id,
                thread_title=title,
                content=c.content,
                created_at=c.created_at,
            )
            for c, title in comment_rows
        ],
        stats=schemas.ForumProfileStats(
            threadCount=thread_count or 0,
            commentCount=comment_count or 0,
            totalLikes=(thread_likes or 0) + (comment_likes or 0),
        ),
    )
