"""Reminder endpoints.

Reminders are stored here and scheduled on the device; the server never fires them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db

router = APIRouter(prefix="/reminders", tags=["Reminders"])

INVALID_TYPE = "Invalid reminder type. Must be 'mindfulness' or 'water'."


def _reminder_or_404(db: Session, reminder_type: str, reminder_id: int, user: models.User) -> models.Reminder:
    if reminder_type not in models.REMINDER_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_TYPE)
    reminder = (
        db.query(models.Reminder)
        .filter(
            models.Reminder.id == reminder_id,
            models.Reminder.type == reminder_type,
            models.Reminder.user_id == user.user_id,
        )
        .first()
    )
    if reminder is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return reminder


@router.get("", response_model=schemas.RemindersGrouped)
def list_reminders(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.RemindersGrouped:
    """The caller's reminders grouped by type, ordered by time of day."""
    reminders = (
        db.query(models.Reminder)
        .filter(models.Reminder.user_id == current_user.user_id)
        .order_by(models.Reminder.time.asc(), models.Reminder.id.asc())
        .all()
    )
    grouped = schemas.RemindersGrouped()
    for reminder in reminders:
        getattr(grouped, reminder.type).append(schemas.Reminder.model_validate(reminder))
    return grouped


@router.post("", response_model=schemas.Reminder, status_code=status.HTTP_201_CREATED)
def create_reminder(
    payload: schemas.ReminderCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Reminder:
    if payload.type not in models.REMINDER_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_TYPE)
    title = (payload.title or "").strip()
    if not title or payload.time is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and time are required.",
        )

    reminder = models.Reminder(
        user_id=current_user.user_id,
        type=payload.type,
        title=title,
        time=payload.time,
        enabled=payload.enabled,
        frequency=payload.frequency,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)

    return schemas.Reminder.model_validate(reminder)


@router.patch("/{reminder_type}/{reminder_id}", response_model=schemas.Reminder)
def update_reminder(
    reminder_type: str,
    reminder_id: int,
    payload: schemas.ReminderUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Reminder:
    """Partially update a reminder; only the fields sent are changed."""
    reminder = _reminder_or_404(db, reminder_type, reminder_id, current_user)
    updates = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields provided for update.",
        )
    for field, value in updates.items():
        setattr(reminder, field, value)
    db.commit()
    db.refresh(reminder)

    return schemas.Reminder.model_validate(reminder)


@router.delete("/{reminder_type}/{reminder_id}", response_model=schemas.Message)
def delete_reminder(
    reminder_type: str,
    reminder_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Message:
    reminder = _reminder_or_404(db, reminder_type, reminder_id, current_user)
    db.delete(reminder)
    db.commit()
    return schemas.Message(message="Reminder deleted successfully")
