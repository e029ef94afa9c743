"""Mood tracking endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db

router = APIRouter(prefix="/moods", tags=["Moods"])


@router.post("", response_model=schemas.MoodLog, status_code=status.HTTP_201_CREATED)
def log_mood(
    payload: schemas.MoodLogCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.MoodLog:
    """
    Log a mood. The mood is matched case-insensitively and stored in lower case.
    """
    if not payload.mood or not payload.mood.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Mood value is required.")
    mood = payload.mood.strip().lower()
    if mood not in models.MOOD_VALUES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid mood value: {payload.mood}. Must be one of {', '.join(models.MOOD_VALUES)}.",
        )

    log = models.MoodLog(
        user_id=current_user.user_id,
        mood=mood,
        note=payload.note,
        mood_intensity=payload.intensity,
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    return schemas.MoodLog.model_validate(log)


@router.get("", response_model=list[schemas.MoodLog])
def list_moods(
    start: datetime | None = None,
    end: datetime | None = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.MoodLog]:
    """The caller's mood logs, oldest first, optionally bounded by ``start``/``end``."""
    query = db.query(models.MoodLog).filter(models.MoodLog.user_id == current_user.user_id)
    if start is not None:
        query = query.filter(models.MoodLog.logged_at >= start)
    if end is not None:
        query = query.filter(models.MoodLog.logged_at <= end)
    logs = query.order_by(models.MoodLog.logged_at.asc(), models.MoodLog.log_id.asc()).all()
    return [schemas.MoodLog.model_validate(log) for log in logs]


@router.get("/summary", response_model=schemas.MoodSummary)
def mood_summary(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.MoodSummary:
    """Entry count, average intensity and per-mood counts for the caller."""
    total, average = (
        db.query(func.count(models.MoodLog.log_id), func.avg(models.MoodLog.mood_intensity))
        .filter(models.MoodLog.user_id == current_user.user_id)
        .one()
    )
    counts = (
        db.query(models.MoodLog.mood, func.count(models.MoodLog.log_id))
        .filter(models.MoodLog.user_id == current_user.user_id)
        .group_by(models.MoodLog.mood)
        .all()
    )
    return schemas.MoodSummary(
        total_entries=total or 0,
        average_mood_score=float(average) if average is not None else None,
        mood_counts={mood: count for mood, count in counts},
    )
