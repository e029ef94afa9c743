from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from . import models

logger = logging.getLogger(__name__)

ROLES = [
    ("user", "Regular member"),
    ("moderator", "Can edit and delete community content and review reports"),
    ("admin", "Full administrative access"),
]

TOPICS = [
    ("Anxiety", "Share experiences and coping strategies for anxiety"),
    ("Depression", "A supportive space to talk about low mood and depression"),
    ("Stress Management", "Techniques for handling everyday stress"),
    ("Mindfulness", "Meditation, breathing and staying present"),
    ("General Support", "Anything else on your mind"),
]

THREAD_CATEGORIES = [
    ("Question", "Asking the community for advice"),
    ("Experience", "Sharing a personal story"),
    ("Resource", "Recommending a book, app or service"),
    ("Encouragement", "Positive messages and wins"),
]

JOURNAL_CATEGORIES = [
    ("Personal", "Day-to-day reflections"),
    ("Gratitude", "Things you are grateful for"),
    ("Goals", "Plans and progress"),
    ("Therapy", "Notes from therapy sessions"),
]


def _ensure_named(db: Session, model, name_attr: str, rows: list[tuple[str, str]]) -> int:
    column = getattr(model, name_attr)
    existing = {name for (name,) in db.query(column).all()}
    created = 0
    for name, description in rows:
        if name in existing:
            continue
        db.add(model(**{name_attr: name, "description": description}))
        created += 1
    return created


def ensure_seed_data(db: Session) -> None:
    """
    Insert reference data (roles, topics, categories) if missing.

    Idempotent: existing rows are left untouched, so admins can rename
    descriptions without them being reset on restart.
    """
    try:
        created = _ensure_named(db, models.UserRole, "role_name", ROLES)
        created += _ensure_named(db, models.Topic, "name", TOPICS)
        created += _ensure_named(db, models.ThreadCategory, "name", THREAD_CATEGORIES)
        created += _ensure_named(db, models.JournalCategory, "name", JOURNAL_CATEGORIES)
        db.commit()
    except Exception:
        db.rollback()
        raise
    if created:
        logger.info("ensure_seed_data: Created %d reference rows.", created)
    else:
        logger.info("ensure_seed_data: Reference data already present.")
