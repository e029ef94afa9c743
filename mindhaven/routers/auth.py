"""Registration and login endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import check_user_can_authenticate, token_for
from ..deps import get_db, get_settings
from ..services.accounts import EMAIL_RE, create_user, primary_role, verify_password
from ..settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

MIN_PASSWORD_LENGTH = 6


def _auth_user(user: models.User, role_names: list[str], with_status: bool) -> schemas.AuthUser:
    auth_user = schemas.AuthUser(
        user_id=user.user_id,
        username=user.username,
        email=user.email,
        isAdmin="admin" in role_names,
    )
    if with_status:
        auth_user.role = primary_role(role_names)
        auth_user.is_banned = bool(user.is_banned)
    return auth_user


@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: schemas.RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> schemas.AuthResponse:
    """
    Register a new user and sign them in.

    Duplicate email/username are checked up front and again through the
    unique constraints, so a concurrent registration still gets a 409.
    """
    username = (payload.username or "").strip()
    email = (payload.email or "").strip().lower()
    password = payload.password or ""

    if not username or not email or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username, email, and password are required.",
        )
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.",
        )

    if db.query(models.User.user_id).filter(models.User.email == email).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use.")
    if db.query(models.User.user_id).filter(models.User.username == username).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken.")

    try:
        user = create_user(db, username, email, password, settings.default_water_goal_ml)
    except IntegrityError as e:
        error_str = str(e.orig).lower()
        logger.info("Registration lost a uniqueness race: %s", error_str)
        detail = "Email already in use." if "email" in error_str else "Username already taken."
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

    token, role_names = token_for(db, user, settings)
    return schemas.AuthResponse(
        message="User registered successfully!",
        token=token,
        user=_auth_user(user, role_names, with_status=False),
    )


@router.post("/login", response_model=schemas.AuthResponse)
def login(
    payload: schemas.LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> schemas.AuthResponse:
    """
    Log in with email and password.

    Unknown email and wrong password give the same 401.
    """
    email = (payload.email or "").strip().lower()
    password = payload.password or ""
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required.",
        )

    user = db.query(models.User).filter(models.User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")

    check_user_can_authenticate(user)

    token, role_names = token_for(db, user, settings)
    logger.info("User %s logged in", user.user_id)
    return schemas.AuthResponse(
        message="Login successful",
        token=token,
        user=_auth_user(user, role_names, with_status=True),
    )
