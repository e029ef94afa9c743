from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# BASE SCHEMAS
# ============================================================================


class Message(BaseModel):
    """Plain message body; also the shape of every error response."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"
    uptime_s: float | None = None


# ============================================================================
# AUTH SCHEMAS
# ============================================================================


class RegisterRequest(BaseModel):
    """Registration request. Presence checks happen in the handler."""

    username: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class AuthUser(BaseModel):
    user_id: int
    username: str
    email: str
    isAdmin: bool
    role: str | None = None
    is_banned: bool | None = None


class AuthResponse(BaseModel):
    message: str
    token: str
    user: AuthUser


# ============================================================================
# USER SCHEMAS
# ============================================================================


class UserProfile(BaseModel):
    """Full profile of the authenticated user. Never includes password hashes."""

    user_id: int
    username: str
    email: str
    full_name: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    bio: str | None = None
    profile_image: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    water_goal_ml: int | None = None
    is_banned: bool
    created_at: datetime
    updated_at: datetime | None = None
    roles: list[str] = []
    has_journal_password: bool = False

    model_config = ConfigDict(from_attributes=True)


class UserProfileUpdate(BaseModel):
    """Allow-listed profile fields. Unknown keys are ignored."""

    username: str | None = Field(None, min_length=1, max_length=50)
    full_name: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)
    date_of_birth: date | None = None
    gender: str | None = Field(None, max_length=50)
    bio: str | None = Field(None, max_length=5000)
    profile_image: str | None = None
    emergency_contact_name: str | None = Field(None, max_length=100)
    emergency_contact_phone: str | None = Field(None, max_length=50)
    water_goal_ml: int | None = Field(None, gt=0)


class UserSummary(BaseModel):
    """Row in the admin user list."""

    user_id: int
    username: str
    email: str
    is_banned: bool
    created_at: datetime
    roles: list[str] = []

    model_config = ConfigDict(from_attributes=True)


class JournalPasswordSet(BaseModel):
    password: str | None = None
    current_password: str | None = None


class JournalPasswordCheck(BaseModel):
    password: str | None = None


class JournalPasswordVerifyResponse(BaseModel):
    valid: bool


class RoleChange(BaseModel):
    role: str = Field(..., min_length=1, max_length=50)


class UserRolesResponse(BaseModel):
    user_id: int
    roles: list[str]


class BanStatusUpdate(BaseModel):
    is_banned: bool


class BanStatusUser(BaseModel):
    user_id: int
    username: str
    is_banned: bool

    model_config = ConfigDict(from_attributes=True)


class BanStatusResponse(BaseModel):
    message: str
    user: BanStatusUser


# ============================================================================
# COMMUNITY SCHEMAS
# ============================================================================


class Topic(BaseModel):
    topic_id: int
    name: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TopicThreadCount(BaseModel):
    topic_id: int
    name: str
    thread_count: int


class ThreadCategory(BaseModel):
    category_id: int
    name: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ThreadCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, max_length=255)
    content: str | None = Field(None, max_length=20000)
    category_ids: list[int] = Field(default_factory=list, alias="categoryIds")


class ThreadUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    content: str | None = Field(None, max_length=20000)
    reason: str | None = Field(None, max_length=1000)


class Thread(BaseModel):
    """Thread with live aggregates for the requesting user."""

    thread_id: int
    user_id: int
    topic_id: int
    title: str
    content: str
    is_pinned: bool = False
    created_at: datetime
    updated_at: datetime | None = None
    author_name: str | None = None
    comments_count: int = 0
    like_count: int = 0
    user_liked: bool = False
    category_names: list[str] = []


class ThreadMutationResponse(BaseModel):
    message: str
    thread: Thread


class ThreadEdit(BaseModel):
    edit_id: int
    thread_id: int
    editor_id: int
    previous_title: str | None = None
    previous_content: str
    edit_reason: str | None = None
    edited_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str | None = Field(None, max_length=5000)
    parent_comment_id: int | None = Field(None, alias="parentCommentId")


class CommentUpdate(BaseModel):
    content: str | None = Field(None, max_length=5000)
    reason: str | None = Field(None, max_length=1000)


class Comment(BaseModel):
    """
    Comment as rendered in listings.

    Deleted comments are kept as placeholders with ``is_deleted`` set and
    the author hidden.
    """

    comment_id: int
    thread_id: int
    user_id: int | None = None
    parent_comment_id: int | None = None
    content: str
    author_name: str | None = None
    like_count: int = 0
    user_liked: bool = False
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime | None = None


class CommentMutationResponse(BaseModel):
    message: str
    comment: Comment


class LikeToggleResponse(BaseModel):
    liked: bool
    like_count: int


class CategoryAssign(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category_ids: list[int] = Field(default_factory=list, alias="categoryIds")


class ReportCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    thread_id: int | None = Field(None, alias="threadId")
    comment_id: int | None = Field(None, alias="commentId")
    reason: str | None = Field(None, max_length=2000)


class ReportUpdate(BaseModel):
    """Resolve request (admin only). Status is checked in the handler."""

    status: str | None = None


class Report(BaseModel):
    """Content moderation report."""

    report_id: int
    reporter_id: int
    thread_id: int | None = None
    comment_id: int | None = None
    reason: str
    status: Literal["pending", "resolved", "rejected"]
    resolved_by: int | None = None
    resolved_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportListItem(Report):
    thread_title: str | None = None
    comment_content: str | None = None
    reporter_username: str | None = None


class ForumProfileStats(BaseModel):
    threadCount: int
    commentCount: int
    totalLikes: int


class ForumProfileComment(BaseModel):
    comment_id: int
    thread_id: int
    thread_title: str
    content: str
    created_at: datetime


class ForumProfile(BaseModel):
    user_id: int
    username: str
    threads: list[Thread]
    comments: list[ForumProfileComment]
    stats: ForumProfileStats


# ============================================================================
# JOURNAL SCHEMAS
# ============================================================================


MoodValue = Literal["happy", "sad", "angry", "anxious", "neutral"]


class JournalCategory(BaseModel):
    category_id: int
    name: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class JournalEntryCreate(BaseModel):
    title: str | None = Field(None, max_length=255)
    content: str | None = None
    mood: MoodValue = "neutral"
    is_locked: bool = False
    category_id: int | None = None


class JournalEntryUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    content: str | None = None
    mood: MoodValue | None = None
    is_locked: bool | None = None
    category_id: int | None = None


class JournalEntry(BaseModel):
    """Journal entry; ``content`` is null while the entry is locked."""

    id: int
    title: str
    content: str | None = None
    mood: str
    is_locked: bool
    category_id: int | None = None
    category_name: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class UnlockRequest(BaseModel):
    password: str | None = None


# ============================================================================
# MOOD SCHEMAS
# ============================================================================


class MoodLogCreate(BaseModel):
    mood: str | None = None
    note: str | None = Field(None, max_length=2000)
    intensity: int = Field(3, ge=1, le=5)


class MoodLog(BaseModel):
    log_id: int
    mood: str
    note: str | None = None
    mood_intensity: int
    logged_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MoodSummary(BaseModel):
    total_entries: int
    average_mood_score: float | None = None
    mood_counts: dict[str, int]


# ============================================================================
# WATER SCHEMAS
# ============================================================================


class WaterLogCreate(BaseModel):
    amount_ml: int | None = None
    date: dt.date | None = None


class WaterLog(BaseModel):
    log_id: int
    amount_ml: int
    log_date: date
    logged_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WaterLogDetailed(WaterLog):
    hour: int
    minute: int


class WaterProgress(BaseModel):
    date: dt.date
    goal: int
    current: int
    percentage: int
    remaining: int


class WaterLogResponse(BaseModel):
    log: WaterLog
    progress: WaterProgress


class WaterGoal(BaseModel):
    goal: int


class WaterGoalUpdate(BaseModel):
    goal_ml: int | None = None


class WaterLogsDetailed(BaseModel):
    logs: list[WaterLogDetailed]


# ============================================================================
# REMINDER SCHEMAS
# ============================================================================


class ReminderCreate(BaseModel):
    type: str | None = None
    title: str | None = Field(None, max_length=255)
    time: dt.time | None = None
    enabled: bool = True
    frequency: str = Field("daily", max_length=20)


class ReminderUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    time: dt.time | None = None
    enabled: bool | None = None
    frequency: str | None = Field(None, max_length=20)


class Reminder(BaseModel):
    id: int
    type: Literal["mindfulness", "water"]
    title: str
    time: dt.time
    enabled: bool
    frequency: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class RemindersGrouped(BaseModel):
    mindfulness: list[Reminder] = []
    water: list[Reminder] = []


# ============================================================================
# CONTENT SCHEMAS
# ============================================================================


class Quote(BaseModel):
    text: str
    author: str


class MeditationCard(BaseModel):
    """Meditation shaped for the client player."""

    id: int
    title: str
    description: str | None = None
    duration: str
    audioFile: str


class MeditationList(BaseModel):
    meditations: list[MeditationCard]


class Meditation(BaseModel):
    meditation_id: int
    title: str
    description: str | None = None
    theme: str | None = None
    audio_url: str
    duration_seconds: int | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MeditationCreate(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    theme: str | None = Field(None, max_length=100)
    audio_url: str | None = None
    duration_seconds: int | None = Field(None, ge=0)


class MeditationUpdate(BaseModel):
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    theme: str | None = Field(None, max_length=100)
    audio_url: str | None = None
    duration_seconds: int | None = Field(None, ge=0)


ResourceCategory = Literal["Therapy", "Hotlines", "Crisis Centers"]


class Resource(BaseModel):
    resource_id: int
    category: str
    title: str
    description: str | None = None
    contact_info: str | None = None
    link: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ResourceCreate(BaseModel):
    category: ResourceCategory | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    contact_info: str | None = None
    link: str | None = None


class ResourceUpdate(BaseModel):
    category: ResourceCategory | None = None
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    contact_info: str | None = None
    link: str | None = None


class EmergencyContact(BaseModel):
    name: str
    number: str
    description: str
    type: str


class EmergencyResource(BaseModel):
    title: str
    content: str
    type: str


class SedonaExercise(BaseModel):
    id: int
    title: str
    description: str
    duration: str
    steps: list[str]


class SedonaExercises(BaseModel):
    exercises: list[SedonaExercise]


class SedonaLogCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reflection_text: str | None = Field(None, alias="reflectionText", max_length=5000)


class SedonaLog(BaseModel):
    log_id: int
    session_timestamp: datetime
    reflection_text: str | None = None

    model_config = ConfigDict(from_attributes=True)


class Track(BaseModel):
    id: int
    title: str
    duration: str
    url: str


class Playlist(BaseModel):
    id: int
    title: str
    description: str
    tracks: list[Track]
