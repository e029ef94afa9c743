"""Static wellness content: daily quote, emergency contacts, Sedona exercises, music."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db
from ..static_content import EMERGENCY_CONTACTS, EMERGENCY_RESOURCES, PLAYLISTS, QUOTES, SEDONA_EXERCISES

router = APIRouter(tags=["Content"])


def quote_for_day(day: date) -> dict:
    """Same quote all day; cycles through the list by day of year."""
    return QUOTES[day.timetuple().tm_yday % len(QUOTES)]


@router.get("/quotes", response_model=schemas.Quote)
def daily_quote() -> schemas.Quote:
    """Quote of the day. Public."""
    return schemas.Quote(**quote_for_day(date.today()))


@router.get("/emergency/contacts", response_model=list[schemas.EmergencyContact])
def emergency_contacts(
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.EmergencyContact]:
    return [schemas.EmergencyContact(**c) for c in EMERGENCY_CONTACTS]


@router.get("/emergency/resources", response_model=list[schemas.EmergencyResource])
def emergency_resources(
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.EmergencyResource]:
    return [schemas.EmergencyResource(**r) for r in EMERGENCY_RESOURCES]


@router.get("/sedona/sedona-exercises", response_model=schemas.SedonaExercises)
def sedona_exercises(
    current_user: models.User = Depends(get_current_user),
) -> schemas.SedonaExercises:
    return schemas.SedonaExercises(exercises=[schemas.SedonaExercise(**e) for e in SEDONA_EXERCISES])


@router.post("/sedona/logs", response_model=schemas.SedonaLog, status_code=status.HTTP_201_CREATED)
def create_sedona_log(
    payload: schemas.SedonaLogCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.SedonaLog:
    """Record a completed releasing session; the reflection is optional."""
    log = models.SedonaLog(user_id=current_user.user_id, reflection_text=payload.reflection_text)
    db.add(log)
    db.commit()
    db.refresh(log)
    return schemas.SedonaLog.model_validate(log)


@router.get("/sedona/logs", response_model=list[schemas.SedonaLog])
def list_sedona_logs(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.SedonaLog]:
    logs = (
        db.query(models.SedonaLog)
        .filter(models.SedonaLog.user_id == current_user.user_id)
        .order_by(models.SedonaLog.session_timestamp.desc(), models.SedonaLog.log_id.desc())
        .all()
    )
    return [schemas.SedonaLog.model_validate(log) for log in logs]


@router.get("/music/playlist", response_model=list[schemas.Playlist])
@router.get("/music/playlists", response_model=list[schemas.Playlist], include_in_schema=False)
def music_playlists(
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.Playlist]:
    return [schemas.Playlist(**p) for p in PLAYLISTS]
