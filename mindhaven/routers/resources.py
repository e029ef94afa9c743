"""Professional support resources (therapists, hotlines, crisis centers)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user, require_admin
from ..deps import get_db

router = APIRouter(prefix="/resources", tags=["Resources"])


def _resource_or_404(db: Session, resource_id: int) -> models.Resource:
    resource = db.query(models.Resource).filter(models.Resource.resource_id == resource_id).first()
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found.")
    return resource


@router.get("", response_model=list[schemas.Resource])
def list_resources(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
) -> list[schemas.Resource]:
    resources = (
        db.query(models.Resource)
        .order_by(models.Resource.category, models.Resource.title)
        .all()
    )
    return [schemas.Resource.model_validate(r) for r in resources]


@router.post("", response_model=schemas.Resource, status_code=status.HTTP_201_CREATED)
def create_resource(
    payload: schemas.ResourceCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Resource:
    title = (payload.title or "").strip()
    if payload.category is None or not title:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Category and Title are required fields.",
        )
    resource = models.Resource(
        category=payload.category,
        title=title,
        description=payload.description,
        contact_info=payload.contact_info,
        link=payload.link,
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    return schemas.Resource.model_validate(resource)


@router.put("/{resource_id}", response_model=schemas.Resource)
def update_resource(
    resource_id: int,
    payload: schemas.ResourceUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Resource:
    resource = _resource_or_404(db, resource_id)
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields provided for update.",
        )
    if "category" in updates and updates["category"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Category cannot be empty.")
    if "title" in updates:
        updates["title"] = (updates["title"] or "").strip()
        if not updates["title"]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title cannot be empty.")
    for field, value in updates.items():
        setattr(resource, field, value)
    db.commit()
    db.refresh(resource)
    return schemas.Resource.model_validate(resource)


@router.delete("/{resource_id}", response_model=schemas.Message)
def delete_resource(
    resource_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
) -> schemas.Message:
    resource = _resource_or_404(db, resource_id)
    db.delete(resource)
    db.commit()
    return schemas.Message(message=f"Resource {resource_id} deleted successfully.")
