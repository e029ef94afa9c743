"""Journal entry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..deps import get_db
from ..services.accounts import verify_password

router = APIRouter(prefix="/journal", tags=["Journal"])


def _entry_view(entry: models.JournalEntry, reveal: bool = False) -> schemas.JournalEntry:
    """Render an entry; content of a locked entry is withheld unless ``reveal``."""
    return schemas.JournalEntry(
        id=entry.id,
        title=entry.title,
        content=entry.content if (reveal or not entry.is_locked) else None,
        mood=entry.mood,
        is_locked=bool(entry.is_locked),
        category_id=entry.category_id,
        category_name=entry.category.name if entry.category else None,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )


def _entry_or_404(db: Session, entry_id: int, user: models.User) -> models.JournalEntry:
    entry = (
        db.query(models.JournalEntry)
        .filter(models.JournalEntry.id == entry_id, models.JournalEntry.user_id == user.user_id)
        .first()
    )
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found.")
    return entry


def _check_category(db: Session, category_id: int | None) -> None:
    if category_id is None:
        return
    exists = (
        db.query(models.JournalCategory.category_id)
        .filter(models.JournalCategory.category_id == category_id)
        .first()
    )
    if not exists:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category.")


def _check_lockable(user: models.User) -> None:
    if not user.journal_password_hash:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Set a journal password before locking entries.",
        )


@router.get("/entries", response_model=list[schemas.JournalEntry])
def list_entries(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.JournalEntry]:
    entries = (
        db.query(models.JournalEntry)
        .filter(models.JournalEntry.user_id == current_user.user_id)
        .order_by(models.JournalEntry.created_at.desc(), models.JournalEntry.id.desc())
        .all()
    )
    return [_entry_view(e) for e in entries]


@router.post("/entries", response_model=schemas.JournalEntry, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: schemas.JournalEntryCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.JournalEntry:
    title = (payload.title or "").strip()
    content = (payload.content or "").strip()
    if not title or not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title and content are required.",
        )
    _check_category(db, payload.category_id)
    if payload.is_locked:
        _check_lockable(current_user)

    entry = models.JournalEntry(
        user_id=current_user.user_id,
        title=title,
        content=content,
        mood=payload.mood,
        is_locked=payload.is_locked,
        category_id=payload.category_id,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    return _entry_view(entry, reveal=True)


@router.get("/entries/{entry_id}", response_model=schemas.JournalEntry)
def get_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.JournalEntry:
    return _entry_view(_entry_or_404(db, entry_id, current_user))


@router.put("/entries/{entry_id}", response_model=schemas.JournalEntry)
def update_entry(
    entry_id: int,
    payload: schemas.JournalEntryUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.JournalEntry:
    """
    Update a journal entry. Fields not sent are left unchanged.
    """
    entry = _entry_or_404(db, entry_id, current_user)
    updates = payload.model_dump(exclude_unset=True)

    for field in ("title", "content"):
        if field in updates:
            updates[field] = (updates[field] or "").strip()
            if not updates[field]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Title and content are required.",
                )
    if updates.get("mood") is None:
        updates.pop("mood", None)
    if updates.get("is_locked") is None:
        updates.pop("is_locked", None)
    if "category_id" in updates:
        _check_category(db, updates["category_id"])
    if updates.get("is_locked"):
        _check_lockable(current_user)

    for field, value in updates.items():
        setattr(entry, field, value)
    db.commit()
    db.refresh(entry)

    # Only content the caller just sent is echoed back for a locked entry
    return _entry_view(entry, reveal="content" in updates)


@router.delete("/entries/{entry_id}", response_model=schemas.Message)
def delete_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.Message:
    entry = _entry_or_404(db, entry_id, current_user)
    db.delete(entry)
    db.commit()
    return schemas.Message(message="Journal entry deleted successfully.")


@router.post("/entries/{entry_id}/unlock", response_model=schemas.JournalEntry)
def unlock_entry(
    entry_id: int,
    payload: schemas.UnlockRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> schemas.JournalEntry:
    """
    Reveal a locked entry's content by checking the journal password.

    The entry stays locked; only this response carries the content.
    """
    entry = _entry_or_404(db, entry_id, current_user)
    if not entry.is_locked:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Entry is not locked.")
    if not current_user.journal_password_hash:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No journal password has been set.",
        )
    if not payload.password or not verify_password(payload.password, current_user.journal_password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect journal password.",
        )
    return _entry_view(entry, reveal=True)


@router.get("/categories", response_model=list[schemas.JournalCategory])
def list_categories(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.JournalCategory]:
    categories = db.query(models.JournalCategory).order_by(models.JournalCategory.name).all()
    return [schemas.JournalCategory.model_validate(c) for c in categories]
