"""Guided meditation catalog. Reading is open to users; changes are admin only."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, require_admin
from ..deps import get_db

router = APIRouter(prefix="/meditations", tags=["Meditations"])


def _card(meditation: models.Meditation) -> schemas.MeditationCard:
    minutes = (meditation.duration_seconds or 0) // 60
    return schemas.MeditationCard(
        id=meditation.meditation_id,
        title=meditation.title,
        description=meditation.description,
        duration=f"{minutes} minutes",
        audioFile=meditation.audio_url,
    )


def _meditation_or_404(db: Session, meditation_id: int) -> models.Meditation:
    meditation = (
        db.query(models.Meditation)
        .filter(models.Meditation.meditation_id == meditation_id)
        .first()
    )
    if meditation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meditation not found.")
    return meditation


@router.get("", response_model=schemas.MeditationList)
def list_meditations(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.MeditationList:
    meditations = db.query(models.Meditation).order_by(models.Meditation.meditation_id).all()
    return schemas.MeditationList(meditations=[_card(m) for m in meditations])


@router.post("", response_model=schemas.Meditation, status_code=status.HTTP_201_CREATED)
def create_meditation(
    payload: schemas.MeditationCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Meditation:
    title = (payload.title or "").strip()
    audio_url = (payload.audio_url or "").strip()
    if not title or not audio_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and Audio URL are required.",
        )
    meditation = models.Meditation(
        title=title,
        description=payload.description,
        theme=payload.theme,
        audio_url=audio_url,
        duration_seconds=payload.duration_seconds,
    )
    db.add(meditation)
    db.commit()
    db.refresh(meditation)
    return schemas.Meditation.model_validate(meditation)


@router.put("/{meditation_id}", response_model=schemas.Meditation)
def update_meditation(
    meditation_id: int,
    payload: schemas.MeditationUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Meditation:
    """Partial update; title and audio URL may be changed but never cleared."""
    meditation = _meditation_or_404(db, meditation_id)
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields provided for update.",
        )
    for field in ("title", "audio_url"):
        if field in updates:
            updates[field] = (updates[field] or "").strip()
            if not updates[field]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Title or Audio URL cannot be empty.",
                )
    for field, value in updates.items():
        setattr(meditation, field, value)
    db.commit()
    db.refresh(meditation)
    return schemas.Meditation.model_validate(meditation)


@router.delete("/{meditation_id}", response_model=schemas.Message)
def delete_meditation(
    meditation_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Message:
    meditation = _meditation_or_404(db, meditation_id)
    db.delete(meditation)
    db.commit()
    return schemas.Message(message=f"Meditation {meditation_id} deleted successfully.")
