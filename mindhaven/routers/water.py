"""Water intake tracking endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db, get_settings
from ..settings import Settings

router = APIRouter(prefix="/water", tags=["Water"])


def _goal(user: models.User, settings: Settings) -> int:
    return user.water_goal_ml or settings.fallback_water_goal_ml


def _progress(db: Session, user: models.User, day: date, settings: Settings) -> schemas.WaterProgress:
    """Intake against goal for one day; percentage is capped at 100."""
    goal = _goal(user, settings)
    current = (
        db.query(func.coalesce(func.sum(models.WaterLog.amount_ml), 0))
        .filter(models.WaterLog.user_id == user.user_id, models.WaterLog.log_date == day)
        .scalar()
    ) or 0
    percentage = min(100, round(current * 100 / goal)) if goal else 0
    return schemas.WaterProgress(
        date=day,
        goal=goal,
        current=current,
        percentage=percentage,
        remaining=max(0, goal - current),
    )


@router.get("/progress", response_model=schemas.WaterProgress)
def get_progress(
    day: date | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> schemas.WaterProgress:
    return _progress(db, current_user, day or date.today(), settings)


@router.get("/logs/detailed", response_model=schemas.WaterLogsDetailed)
def get_detailed_logs(
    day: date | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.WaterLogsDetailed:
    """Individual logs of one day with the hour and minute they were recorded."""
    day = day or date.today()
    logs = (
        db.query(models.WaterLog)
        .filter(models.WaterLog.user_id == current_user.user_id, models.WaterLog.log_date == day)
        .order_by(models.WaterLog.logged_at.asc(), models.WaterLog.log_id.asc())
        .all()
    )
    return schemas.WaterLogsDetailed(
        logs=[
            schemas.WaterLogDetailed(
                log_id=log.log_id,
                amount_ml=log.amount_ml,
                log_date=log.log_date,
                logged_at=log.logged_at,
                hour=log.logged_at.hour,
                minute=log.logged_at.minute,
            )
            for log in logs
        ]
    )


@router.post("/logs", response_model=schemas.WaterLogResponse, status_code=status.HTTP_201_CREATED)
def log_water(
    payload: schemas.WaterLogCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> schemas.WaterLogResponse:
    """Record an intake and return it with the updated progress for that day."""
    if payload.amount_ml is None or payload.amount_ml <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid amount_ml is required",
        )
    day = payload.date or date.today()

    try:
        log = models.WaterLog(user_id=current_user.user_id, amount_ml=payload.amount_ml, log_date=day)
        db.add(log)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(log)

    return schemas.WaterLogResponse(
        log=schemas.WaterLog.model_validate(log),
        progress=_progress(db, current_user, day, settings),
    )


@router.get("/goal", response_model=schemas.WaterGoal)
def get_goal(
    current_user: models.User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> schemas.WaterGoal:
    return schemas.WaterGoal(goal=_goal(current_user, settings))


@router.put("/goal", response_model=schemas.WaterGoal)
def update_goal(
    payload: schemas.WaterGoalUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.WaterGoal:
    if payload.goal_ml is None or payload.goal_ml <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Valid goal_ml is required",
        )
    current_user.water_goal_ml = payload.goal_ml
    db.commit()
    return schemas.WaterGoal(goal=payload.goal_ml)
