from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .db import Base

MOOD_VALUES = ("happy", "sad", "angry", "anxious", "neutral")
REPORT_STATUSES = ("pending", "resolved", "rejected")
REMINDER_TYPES = ("mindfulness", "water")
RESOURCE_CATEGORIES = ("Therapy", "Hotlines", "Crisis Centers")


def _in_list(column: str, values: tuple[str, ...]) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


# ============================================================================
# USERS & ROLES
# ============================================================================


class User(Base):
    """User account with authentication and profile information."""

    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    bio = Column(Text, nullable=True)
    profile_image = Column(Text, nullable=True)
    emergency_contact_name = Column(String(100), nullable=True)
    emergency_contact_phone = Column(String(50), nullable=True)
    water_goal_ml = Column(Integer, nullable=True)

    # Secondary password guarding locked journal entries
    journal_password_hash = Column(String(255), nullable=True)

    is_banned = Column(Boolean, nullable=False, default=False, server_default="0")

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    role_mappings = relationship(
        "UserRoleMapping", back_populates="user", cascade="all, delete-orphan"
    )


class UserRole(Base):
    """Named role (user, moderator, admin)."""

    __tablename__ = "user_roles"

    role_id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(50), unique=True, nullable=False)
    description = Column(Text, nullable=True)


class UserRoleMapping(Base):
    """Assignment of a role to a user. The only source of role membership."""

    __tablename__ = "user_role_mappings"

    mapping_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id = Column(
        Integer, ForeignKey("user_roles.role_id", ondelete="CASCADE"), nullable=False
    )
    assigned_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user = relationship("User", back_populates="role_mappings")
    role = relationship("UserRole")

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)


# ============================================================================
# COMMUNITY FORUM
# ============================================================================


class Topic(Base):
    """Admin-curated forum subsection."""

    __tablename__ = "topics"

    topic_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class Thread(Base):
    """Discussion thread within a topic. Soft-deleted, never removed."""

    __tablename__ = "threads"

    thread_id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.topic_id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_pinned = Column(Boolean, nullable=False, default=False, server_default="0")

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # Soft delete
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
    deleted_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)

    author = relationship("User", foreign_keys=[user_id])
    topic = relationship("Topic")
    categories = relationship(
        "ThreadCategory", secondary="thread_category_mappings", viewonly=True
    )

    __table_args__ = (
        Index("ix_threads_topic_pinned_created", topic_id, is_pinned, created_at),
    )


class Comment(Base):
    """Comment on a thread; optionally a reply to another comment in the same thread."""

    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    thread_id = Column(Integer, ForeignKey("threads.thread_id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    parent_comment_id = Column(
        Integer, ForeignKey("comments.comment_id"), nullable=True, index=True
    )

    content = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at = Column(DateTime(timezone=True), nullable=True)

    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
    deleted_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)

    author = relationship("User", foreign_keys=[user_id])
    thread = relationship("Thread")

    __table_args__ = (Index("ix_comments_thread_created", thread_id, created_at),)


class ThreadLike(Base):
    __tablename__ = "thread_likes"

    like_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    thread_id = Column(
        Integer, ForeignKey("threads.thread_id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (UniqueConstraint("user_id", "thread_id", name="uq_thread_like_user"),)


class CommentLike(Base):
    __tablename__ = "comment_likes"

    like_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    comment_id = Column(
        Integer, ForeignKey("comments.comment_id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (UniqueConstraint("user_id", "comment_id", name="uq_comment_like_user"),)


class ThreadEdit(Base):
    """Append-only history: the thread's values immediately before an edit."""

    __tablename__ = "thread_edits"

    edit_id = Column(Integer, primary_key=True, autoincrement=True)
    thread_id = Column(Integer, ForeignKey("threads.thread_id"), nullable=False, index=True)
    editor_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    previous_title = Column(String(255), nullable=True)
    previous_content = Column(Text, nullable=False)
    edit_reason = Column(Text, nullable=True)
    edited_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CommentEdit(Base):
    """Append-only history: the comment's content immediately before an edit."""

    __tablename__ = "comment_edits"

    edit_id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.comment_id"), nullable=False, index=True)
    editor_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    previous_content = Column(Text, nullable=False)
    edit_reason = Column(Text, nullable=True)
    edited_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ThreadCategory(Base):
    __tablename__ = "thread_categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)


class ThreadCategoryMapping(Base):
    __tablename__ = "thread_category_mappings"

    thread_id = Column(
        Integer, ForeignKey("threads.thread_id", ondelete="CASCADE"), primary_key=True
    )
    category_id = Column(
        Integer, ForeignKey("thread_categories.category_id", ondelete="CASCADE"), primary_key=True
    )


class ContentReport(Base):
    """User report against exactly one thread or comment."""

    __tablename__ = "content_reports"

    report_id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    reporter_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    thread_id = Column(Integer, ForeignKey("threads.thread_id"), nullable=True, index=True)
    comment_id = Column(Integer, ForeignKey("comments.comment_id"), nullable=True, index=True)

    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="pending", server_default="pending", index=True)

    resolved_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )

    __table_args__ = (
        CheckConstraint(
            "(thread_id IS NOT NULL AND comment_id IS NULL) OR "
            "(thread_id IS NULL AND comment_id IS NOT NULL)",
            name="ck_content_reports_one_target",
        ),
        CheckConstraint(_in_list("status", REPORT_STATUSES), name="ck_content_reports_status"),
    )


# ============================================================================
# JOURNAL
# ============================================================================


class JournalCategory(Base):
    __tablename__ = "journal_categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)


class JournalEntry(Base):
    """Private journal entry; content hidden while locked."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id = Column(
        Integer, ForeignKey("journal_categories.category_id"), nullable=True
    )

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    mood = Column(String(20), nullable=False, default="neutral", server_default="neutral")
    is_locked = Column(Boolean, nullable=False, default=False, server_default="0")

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    category = relationship("JournalCategory")

    __table_args__ = (
        CheckConstraint(_in_list("mood", MOOD_VALUES), name="ck_journal_entries_mood"),
    )


# ============================================================================
# TRACKING
# ============================================================================


class MoodLog(Base):
    __tablename__ = "mood_logs"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    mood = Column(String(20), nullable=False)
    note = Column(Text, nullable=True)
    mood_intensity = Column(Integer, nullable=False, default=3, server_default="3")
    logged_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )

    __table_args__ = (
        CheckConstraint(_in_list("mood", MOOD_VALUES), name="ck_mood_logs_mood"),
        CheckConstraint("mood_intensity BETWEEN 1 AND 5", name="ck_mood_logs_intensity"),
    )


class WaterLog(Base):
    __tablename__ = "water_logs"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    amount_ml = Column(Integer, nullable=False)
    log_date = Column(Date, nullable=False, index=True)
    logged_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("amount_ml > 0", name="ck_water_logs_amount"),
        Index("ix_water_logs_user_date", user_id, log_date),
    )


class Reminder(Base):
    """Reminder tuple handed to the client's local notification scheduler."""

    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(20), nullable=False)
    title = Column(String(255), nullable=False)
    time = Column(Time, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True, server_default="1")
    frequency = Column(String(20), nullable=False, default="daily", server_default="daily")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    __table_args__ = (
        CheckConstraint(_in_list("type", REMINDER_TYPES), name="ck_reminders_type"),
    )


class SedonaLog(Base):
    __tablename__ = "sedona_method_logs"

    log_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )
    reflection_text = Column(Text, nullable=True)
    session_timestamp = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


# ============================================================================
# CURATED CONTENT
# ============================================================================


class Meditation(Base):
    __tablename__ = "guided_meditations"

    meditation_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    theme = Column(String(100), nullable=True)
    audio_url = Column(Text, nullable=False)
    duration_seconds = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class Resource(Base):
    __tablename__ = "professional_resources"

    resource_id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    contact_info = Column(Text, nullable=True)
    link = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    __table_args__ = (
        CheckConstraint(_in_list("category", RESOURCE_CATEGORIES), name="ck_resources_category"),
    )


# ============================================================================
# MODERATION
# ============================================================================


class AuditLog(Base):
    """Audit log for admin and moderator actions."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    actor_id = Column(
        Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True
    )

    action = Column(String(100), nullable=False, index=True)
    target_type = Column(String(20), nullable=True)
    target_id = Column(String(50), nullable=True, index=True)
    note = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )

    __table_args__ = (
        Index("ix_audit_logs_actor_created", actor_id, created_at.desc()),
    )
