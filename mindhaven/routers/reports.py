"""Content reporting and moderation endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, aliased

from .. import models, schemas
from ..auth import get_current_user, require_admin
from ..deps import get_db
from ..services import forum
from ..utils.audit import log_moderation_action

router = APIRouter(prefix="/community", tags=["Reports"])

RESOLUTION_STATUSES = ("resolved", "rejected")


@router.post("/reports", response_model=schemas.Report, status_code=status.HTTP_201_CREATED)
def create_report(
    payload: schemas.ReportCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Report:
    """
    Report a thread or a comment (exactly one of them).
    """
    if (payload.thread_id is None) == (payload.comment_id is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Exactly one of threadId or commentId is required",
        )
    reason = (payload.reason or "").strip()
    if not reason:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reason is required")

    if payload.thread_id is not None:
        if forum.get_live_thread(db, payload.thread_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thread not found")
    elif forum.get_live_comment(db, payload.comment_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")

    report = models.ContentReport(
        reporter_id=current_user.user_id,
        thread_id=payload.thread_id,
        comment_id=payload.comment_id,
        reason=reason,
        status="pending",
    )
    db.add(report)
    db.commit()
    db.refresh(report)

    return schemas.Report.model_validate(report)


@router.get("/reports", response_model=list[schemas.ReportListItem])
def list_reports(
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> list[schemas.ReportListItem]:
    """
    List pending reports (admin only), newest first.

    Reports on content that has since been deleted are left out.
    """
    Reporter = aliased(models.User)
    rows = (
        db.query(
            models.ContentReport,
            models.Thread.title,
            models.Comment.content,
            Reporter.username,
        )
        .join(Reporter, Reporter.user_id == models.ContentReport.reporter_id)
        .outerjoin(models.Thread, models.Thread.thread_id == models.ContentReport.thread_id)
        .outerjoin(models.Comment, models.Comment.comment_id == models.ContentReport.comment_id)
        .filter(
            models.ContentReport.status == "pending",
            models.Thread.deleted_at.is_(None),
            models.Comment.deleted_at.is_(None),
        )
        .order_by(models.ContentReport.created_at.desc(), models.ContentReport.report_id.desc())
        .all()
    )

    items = []
    for report, thread_title, comment_content, reporter_username in rows:
        item = schemas.ReportListItem.model_validate(report)
        item.thread_title = thread_title
        item.comment_content = comment_content
        item.reporter_username = reporter_username
        items.append(item)
    return items


@router.patch("/reports/{report_id}", response_model=schemas.Report)
def resolve_report(
    report_id: int,
    payload: schemas.ReportUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Report:
    """
    Resolve or reject a report (admin only).
    """
    if payload.status not in RESOLUTION_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status")

    report = db.query(models.ContentReport).filter(models.ContentReport.report_id == report_id).first()
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")

    try:
        report.status = payload.status
        report.resolved_by = admin.user_id
        report.resolved_at = datetime.now(timezone.utc)
        log_moderation_action(
            db=db,
            actor_id=admin.user_id,
            action=f"report_{payload.status}",
            target_type="report",
            target_id=report_id,
            commit=False,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(report)

    return schemas.Report.model_validate(report)
